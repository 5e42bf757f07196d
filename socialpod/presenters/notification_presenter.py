from socialpod.presenters.base import BasePresenter, api_timestamp
from socialpod.presenters.person_presenter import PersonPresenter
from socialpod.services.notification_service import api_type_name


class NotificationPresenter(BasePresenter):
    def as_api_json(self, include_target: bool = True) -> dict:
        data = self._base_hash()
        if include_target and self.target is not None:
            data["target"] = self._target_json()
        return data

    def _base_hash(self) -> dict:
        return {
            "guid": self.guid,
            "type": api_type_name(self.type),
            "read": not self.unread,
            "created_at": api_timestamp(self.created_at),
            "event_creators": self._creators_json(),
        }

    def _target_json(self) -> dict:
        return {
            "guid": self.target.guid,
            "author": PersonPresenter(self.target.author).as_api_json(),
        }

    def _creators_json(self) -> list:
        return [PersonPresenter(actor).as_api_json() for actor in self.actors]
