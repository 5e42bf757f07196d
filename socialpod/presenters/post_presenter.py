from socialpod.presenters.base import BasePresenter, api_timestamp
from socialpod.presenters.person_presenter import PersonPresenter
from socialpod.presenters.photo_presenter import PhotoPresenter


class PostPresenter(BasePresenter):
    def as_api_json(self) -> dict:
        return {
            "guid": self.guid,
            "body": self.text or "",
            "public": self.public,
            "created_at": api_timestamp(self.created_at),
            "author": PersonPresenter(self.author).as_api_json(),
            "photos": [PhotoPresenter(photo).as_api_json() for photo in self.photos],
        }
