import unittest

from rest_framework import status

from apps.api.utils import error_from_tuple, error_response


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "Product not found", {"id": "9"})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.data["error"]["status"], status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["details"], {"id": "9"})

    def test_code_is_upper_cased_and_unknown_codes_default_to_400(self):
        resp = error_response("sync_failed", "Cart could not be saved")
        self.assertEqual(resp.data["error"]["code"], "SYNC_FAILED")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_custom_status_override(self):
        resp = error_response("ACCEPTED", "queued", http_status=status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.status_code, status.HTTP_202_ACCEPTED)

    def test_hint_and_extra(self):
        resp = error_response(
            "VALIDATION_ERROR",
            "Invalid price range",
            hint="Use non-negative numbers",
            extra={"field": "min_price"},
        )
        payload = resp.data["error"]
        self.assertEqual(payload["hint"], "Use non-negative numbers")
        self.assertEqual(payload["extra"], {"field": "min_price"})

    def test_upstream_error_maps_to_502(self):
        self.assertEqual(
            error_response("UPSTREAM_ERROR", "Cloudinary down").status_code,
            status.HTTP_502_BAD_GATEWAY,
        )

    def test_blank_code_rejected(self):
        with self.assertRaises(ValueError):
            error_response("  ", "message")
        with self.assertRaises(ValueError):
            error_response("CODE", "")

    def test_extra_must_be_mapping(self):
        with self.assertRaises(TypeError):
            error_response("CODE", "msg", extra=["nope"])

    def test_error_from_tuple_unpacks_service_errors(self):
        resp = error_from_tuple(("NOT_FOUND", "Slide not found", {"id": "3"}))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["details"], {"id": "3"})

    def test_error_from_tuple_accepts_two_element_tuples(self):
        resp = error_from_tuple(("FORBIDDEN", "Admins only"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertNotIn("details", resp.data["error"])
