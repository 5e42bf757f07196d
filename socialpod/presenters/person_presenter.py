from socialpod.config import settings
from socialpod.presenters.base import BasePresenter


class PersonPresenter(BasePresenter):
    def as_api_json(self) -> dict:
        return {
            "guid": self.guid,
            "diaspora_id": self.diaspora_id,
            "name": self.name,
            "avatar": self.avatar_url(),
        }

    def avatar_url(self) -> str:
        profile = self.profile
        if profile is not None and profile.image_url_medium:
            return profile.image_url_medium
        return settings.default_avatar_url
