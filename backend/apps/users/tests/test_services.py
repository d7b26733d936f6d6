from datetime import datetime, timezone

from django.test import SimpleTestCase, override_settings

from apps.users.services import ProfileService


class FakeUser:
    def __init__(self, user_id, email, full_name="", is_staff=False):
        self.id = user_id
        self.email = email
        self.full_name = full_name
        self.is_staff = is_staff
        self.is_superuser = False
        self.is_authenticated = True
        self.date_joined = datetime(2024, 5, 1, tzinfo=timezone.utc)


class FakeUserRepository:
    def __init__(self, *users):
        self.storage = {u.id: u for u in users}

    def get(self, **filters):
        return self.storage.get(filters.get("id"))

    def update(self, obj, **data):
        for key, value in data.items():
            setattr(obj, key, value)
        return obj


@override_settings(ADMIN_EMAIL="admin@ariesmall.com")
class ProfileServiceTests(SimpleTestCase):
    def setUp(self):
        self.repo = FakeUserRepository(
            FakeUser(1, "asha@example.com", "Asha Rao"),
            FakeUser(2, "admin@ariesmall.com"),
        )
        self.service = ProfileService(users=self.repo)

    def test_get_profile_uses_full_name_as_display_name(self):
        dto = self.service.get_profile(1)
        self.assertEqual(dto.display_name, "Asha Rao")
        self.assertEqual(dto.member_since, "2024-05-01T00:00:00+00:00")
        self.assertFalse(dto.is_admin)

    def test_display_name_falls_back_to_email(self):
        dto = self.service.get_profile(2)
        self.assertEqual(dto.display_name, "admin@ariesmall.com")
        self.assertTrue(dto.is_admin)

    def test_get_profile_missing_user(self):
        self.assertIsNone(self.service.get_profile(99))

    def test_update_full_name(self):
        dto, error = self.service.update_full_name(1, "Asha R.")
        self.assertIsNone(error)
        self.assertEqual(dto.full_name, "Asha R.")
        self.assertEqual(self.repo.storage[1].full_name, "Asha R.")

    def test_update_missing_user_returns_error_tuple(self):
        dto, error = self.service.update_full_name(42, "Nobody")
        self.assertIsNone(dto)
        self.assertEqual(error[0], "NOT_FOUND")
