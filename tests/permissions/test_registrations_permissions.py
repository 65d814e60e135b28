from rest_framework import status

from tests.permissions.mixins import ROLE_ADMIN
from tests.permissions.mixins import ROLE_ANONYMOUS
from tests.permissions.mixins import ROLE_OTHER_STUDENT
from tests.permissions.mixins import ROLE_STUDENT
from tests.permissions.mixins import RoleAPITestCase


class RegistrationPermissionTests(RoleAPITestCase):
    def test_anonymous_is_rejected(self):
        response = self.get("api:registration-my-registrations", role=ROLE_ANONYMOUS)
        self.assert_denied(response, status.HTTP_401_UNAUTHORIZED)

    def test_student_sees_only_own_registrations(self):
        response = self.get("api:registration-my-registrations", role=ROLE_STUDENT)
        self.assert_allowed(response)
        ids = {row["id"] for row in response.data["data"]["registrations"]}
        assert ids == {self.registrations[ROLE_STUDENT].pk}

    def test_detail_is_owner_or_admin(self):
        kwargs = {"pk": self.registrations[ROLE_STUDENT].pk}
        self.assert_allowed(
            self.get("api:registration-detail", role=ROLE_STUDENT, reverse_kwargs=kwargs),
        )
        self.assert_allowed(
            self.get("api:registration-detail", role=ROLE_ADMIN, reverse_kwargs=kwargs),
        )
        self.assert_denied(
            self.get(
                "api:registration-detail",
                role=ROLE_OTHER_STUDENT,
                reverse_kwargs=kwargs,
            ),
        )

    def test_cancel_is_owner_only(self):
        kwargs = {"pk": self.registrations[ROLE_STUDENT].pk}
        for role in (ROLE_OTHER_STUDENT, ROLE_ADMIN):
            self.assert_denied(
                self.put("api:registration-cancel", role=role, reverse_kwargs=kwargs),
            )
        self.assert_allowed(
            self.put("api:registration-cancel", role=ROLE_STUDENT, reverse_kwargs=kwargs),
        )

    def test_admin_tools(self):
        roster = {"event_id": self.event.pk}
        attendance = {"pk": self.registrations[ROLE_OTHER_STUDENT].pk}
        self.assert_denied(
            self.get("api:registration-event", role=ROLE_STUDENT, reverse_kwargs=roster),
        )
        self.assert_denied(
            self.put(
                "api:registration-attendance",
                role=ROLE_OTHER_STUDENT,
                reverse_kwargs=attendance,
            ),
        )
        self.assert_denied(
            self.post(
                "api:registration-bulk-status",
                role=ROLE_STUDENT,
                payload={"ids": [1], "status": "confirmed"},
            ),
        )
        self.assert_allowed(
            self.get("api:registration-event", role=ROLE_ADMIN, reverse_kwargs=roster),
        )
        self.assert_allowed(
            self.put(
                "api:registration-attendance",
                role=ROLE_ADMIN,
                reverse_kwargs=attendance,
            ),
        )
        self.assert_allowed(self.get("api:registration-analytics", role=ROLE_ADMIN))
