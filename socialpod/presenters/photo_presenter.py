from socialpod.presenters.base import BasePresenter, api_timestamp
from socialpod.presenters.person_presenter import PersonPresenter


class PhotoPresenter(BasePresenter):
    def as_api_json(self, full: bool = False) -> dict:
        photo = {
            "dimensions": {
                "height": self.height,
                "width": self.width,
            },
            "sizes": {
                "small": self.url("small"),
                "medium": self.url("medium"),
                "large": self.url("large"),
            },
        }
        if not full:
            return photo

        data = {
            "guid": self.guid,
            "created_at": api_timestamp(self.created_at),
            "author": PersonPresenter(self.author).as_api_json(),
        }
        # Present only for photos attached to a post
        if self.status_message_guid:
            data["post"] = self.status_message_guid
        data.update(photo)
        return data
