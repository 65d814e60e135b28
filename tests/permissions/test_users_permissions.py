from rest_framework import status

from tests.permissions.mixins import ROLE_ADMIN
from tests.permissions.mixins import ROLE_ANONYMOUS
from tests.permissions.mixins import ROLE_STUDENT
from tests.permissions.mixins import RoleAPITestCase


class UserPermissionTests(RoleAPITestCase):
    def test_user_directory_is_admin_only(self):
        self.assert_denied(
            self.get("api:user-list", role=ROLE_ANONYMOUS),
            status.HTTP_401_UNAUTHORIZED,
        )
        self.assert_denied(self.get("api:user-list", role=ROLE_STUDENT))
        response = self.get("api:user-list", role=ROLE_ADMIN)
        self.assert_allowed(response)

    def test_audit_feed_is_admin_only(self):
        self.assert_denied(self.get("api:audit:recent", role=ROLE_STUDENT))
        self.assert_allowed(self.get("api:audit:recent", role=ROLE_ADMIN))

    def test_stats_are_admin_only(self):
        self.assert_denied(self.get("auth:stats", role=ROLE_STUDENT))
        self.assert_allowed(self.get("auth:stats", role=ROLE_ADMIN))
