"""Settings store."""
from plansync.models.settings import NotificationPreferenceUpdate, UserSettings
from plansync.store.base import SnapshotStore


class SettingsStore(SnapshotStore[UserSettings]):
    """App-wide preferences persisted under the ``settings`` key."""

    key = "settings"
    state_model = UserSettings

    def update_notification_preference(
        self, update: NotificationPreferenceUpdate
    ) -> UserSettings:
        def apply(state: UserSettings) -> UserSettings:
            preference = state.notification_preference.model_copy(
                update=update.model_dump(exclude_unset=True)
            )
            return state.model_copy(update={"notification_preference": preference})

        return self.transact(apply)

    def set_timezone(self, timezone: str) -> UserSettings:
        return self.transact(lambda state: state.model_copy(update={"timezone": timezone}))

    def complete_onboarding(self) -> UserSettings:
        return self.transact(
            lambda state: state.model_copy(update={"onboarding_completed": True})
        )
