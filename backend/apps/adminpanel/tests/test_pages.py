import unittest
from types import SimpleNamespace

from apps.adminpanel.pages import dashboard, login, media_hub, products, profile
from apps.api.exceptions import ExternalServiceError
from apps.media.config import MediaConfigError
from apps.media.dtos import MediaHistoryDTO, UploadResult, UpscaleResult
from apps.storefront.tests.test_pages import run_page
from .fakes import ADMIN, PRODUCTS, SHOPPER, admin_services, make_admin_ctx

SAMPLE_URL = "https://res.cloudinary.com/demo/image/upload/v1/sofa.jpg"


class DashboardPageTests(unittest.TestCase):
    def test_stats_and_distribution(self):
        ctx = make_admin_ctx()
        run_page(dashboard.initialize, ctx)
        self.assertEqual(ctx.document.html("stat_total_products"), "3")
        self.assertEqual(ctx.document.html("stat_total_categories"), "2")
        self.assertIn("2 Products", ctx.document.html("category_distribution"))
        latest = ctx.document.html("latest_products")
        self.assertIn("Luxury Leather Sofa", latest)
        self.assertIn(dashboard.THUMB_PLACEHOLDER, latest)

    def test_empty_catalog(self):
        self.assertEqual(
            dashboard.latest_products([]),
            '<p class="empty-state">No products found in the database.</p>',
        )


class ProductManagerTests(unittest.TestCase):
    def setUp(self):
        self.services = admin_services()
        self.products = self.services["products"]
        self.slides = self.services["slides"]

    def make(self, **query):
        return make_admin_ctx("/product-manager", query=query, services=self.services)

    def test_lists_products_with_search(self):
        ctx = self.make(q="sofa")
        run_page(products.initialize, ctx)
        self.products.list_products.assert_called_with("sofa")
        self.assertEqual(ctx.document.html("product_table").count("<tr"), 3)
        self.assertEqual(ctx.document.data["search"], "sofa")
        self.assertIsNone(ctx.document.data["form"])

    def test_no_products(self):
        self.products.list_products.return_value = []
        ctx = self.make()
        run_page(products.initialize, ctx)
        self.assertIn("No products found.", ctx.document.html("product_table"))

    def test_edit_opens_prefilled_form(self):
        ctx = self.make(edit="3")
        run_page(products.initialize, ctx)
        form = ctx.document.data["form"]
        self.assertEqual(form["heading"], "Edit Product")
        self.assertEqual(form["values"]["image_main"], "https://img/sofa.jpg")
        self.assertEqual(form["values"]["images_gallery"], "https://img/sofa-2.jpg, https://img/sofa-3.jpg")
        self.assertEqual(form["values"]["features"], "Solid wood, Easy assembly")

    def test_new_product_form(self):
        ctx = self.make(edit="new")
        run_page(products.initialize, ctx)
        self.assertEqual(ctx.document.data["form"]["heading"], "Add New Product")

    def test_invalid_form_is_reopened_with_errors(self):
        ctx = self.make(edit="new")
        run_page(products.initialize, ctx, ("save-product", {"name": "Lamp", "category": "Decor", "price": "abc"}))
        self.assertIn("price", ctx.document.data["errors"])
        self.assertEqual(ctx.document.data["form"]["values"]["name"], "Lamp")
        self.assertEqual(ctx.toasts.pending[-1]["title"], "Error")
        self.products.create_product.assert_not_called()

    def test_create_product(self):
        self.products.create_product.return_value = (PRODUCTS[0], None)
        ctx = self.make(edit="new")
        run_page(
            products.initialize,
            ctx,
            ("save-product", {"product_id": "", "name": "Lamp", "category": "Decor", "price": "49.50", "rating": "",
                              "image_main": "https://img/lamp.jpg", "images_gallery": "https://img/l2.jpg, ",
                              "features": "LED, Dimmable"}),
        )
        data = self.products.create_product.call_args.args[0]
        self.assertNotIn("rating", data)
        self.assertEqual(data["images_gallery"], ["https://img/l2.jpg"])
        self.assertEqual(data["features"], ["LED", "Dimmable"])
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Product successfully created.")
        self.assertNotIn("edit", ctx.query)
        self.assertIsNone(ctx.document.data["form"])

    def test_update_product(self):
        self.products.update_product.return_value = (PRODUCTS[0], None)
        ctx = self.make(edit="3")
        run_page(products.initialize, ctx, ("save-product", {"product_id": "3", "name": "Sofa", "category": "Furniture", "price": "1100"}))
        pk, _, partial = self.products.update_product.call_args.args
        self.assertEqual((pk, partial), (3, False))
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Product successfully updated.")

    def test_service_error_is_toasted(self):
        self.products.update_product.return_value = (None, ("NOT_FOUND", "Product not found", {"id": "9"}))
        ctx = self.make()
        run_page(products.initialize, ctx, ("save-product", {"product_id": "9", "name": "Sofa", "category": "Furniture", "price": "1"}))
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Could not save product: Product not found")

    def test_delete_product(self):
        self.products.delete_product.return_value = (True, None)
        ctx = self.make()
        run_page(products.initialize, ctx, ("delete-product", {"product_id": "4"}))
        self.products.delete_product.assert_called_once_with(4)
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Product deleted.")

    def test_delete_missing_product(self):
        self.products.delete_product.return_value = (False, ("NOT_FOUND", "Product not found", None))
        ctx = self.make()
        run_page(products.initialize, ctx, ("delete-product", {"product_id": "99"}))
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Could not delete product.")

    def test_slides_tab(self):
        ctx = self.make(tab="slides")
        run_page(products.initialize, ctx)
        html = ctx.document.html("slide_table")
        self.assertIn("Summer Sale", html)
        self.assertIn("Inactive", html)

    def test_no_slides(self):
        self.slides.list_slides.return_value = []
        ctx = self.make(tab="slides")
        run_page(products.initialize, ctx)
        self.assertIn("No slides found. Add one to get started!", ctx.document.html("slide_table"))

    def test_create_slide_converts_flags(self):
        self.slides.create_slide.return_value = SimpleNamespace(id=5)
        ctx = self.make(tab="slides", edit="new")
        run_page(
            products.initialize,
            ctx,
            ("save-slide", {"slide_id": "", "title": "Winter", "is_active": "false", "show_overlay": "true",
                            "fit_desktop": "cover", "fit_mobile": "contain", "image_url_desktop": ""}),
        )
        data = self.slides.create_slide.call_args.args[0]
        self.assertIs(data["is_active"], False)
        self.assertIs(data["show_overlay"], True)
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Slide successfully created.")

    def test_delete_slide(self):
        self.slides.delete_slide.return_value = (True, None)
        ctx = self.make(tab="slides")
        run_page(products.initialize, ctx, ("delete-slide", {"slide_id": "2"}))
        self.assertEqual(ctx.toasts.pending[-1]["message"], "Slide deleted successfully.")


class MediaHubTests(unittest.TestCase):
    def setUp(self):
        self.services = admin_services()

    def make(self, **query):
        return make_admin_ctx("/media-hub", query=query, services=self.services)

    def test_upload_by_url_keeps_result_in_query(self):
        self.services["uploader"].upload.return_value = UploadResult(name="sofa", url=SAMPLE_URL, optimized=False)
        ctx = self.make(tab="uploader")
        run_page(media_hub.initialize, ctx, ("upload", {"url": SAMPLE_URL, "custom_name": "sofa"}))
        _, kwargs = self.services["uploader"].upload.call_args
        self.assertEqual(kwargs["admin_email"], "admin@ariesmall.com")
        self.assertEqual(kwargs["custom_name"], "sofa")
        self.assertEqual(ctx.query["uploaded"], SAMPLE_URL)
        self.assertIn("/upload/w_1080,h_1080,c_fill,e_upscale,q_auto,f_auto/", ctx.document.html("upload_result"))

    def test_result_is_rendered_from_query(self):
        ctx = self.make(tab="uploader", uploaded=SAMPLE_URL, name="sofa")
        run_page(media_hub.initialize, ctx)
        self.assertIn("Desktop Slider", ctx.document.html("upload_result"))

    def test_missing_source(self):
        ctx = self.make()
        run_page(media_hub.initialize, ctx, ("upload", {"url": "  "}))
        self.assertEqual(ctx.toasts.pending[-1]["title"], "Invalid URL")
        self.services["uploader"].upload.assert_not_called()

    def test_configuration_error(self):
        self.services["uploader"].upload.side_effect = MediaConfigError(
            "API tokens or Cloudinary details are not set.", ["CLOUDINARY_CLOUD_NAME"]
        )
        ctx = self.make()
        run_page(media_hub.initialize, ctx, ("upload", {"url": SAMPLE_URL}))
        self.assertEqual(ctx.toasts.pending[-1]["title"], "Configuration Error")
        self.assertNotIn("uploaded", ctx.query)

    def test_upstream_failure_leaves_toast_to_service(self):
        self.services["uploader"].upload.side_effect = ExternalServiceError("cloudinary", "boom")
        ctx = self.make()
        run_page(media_hub.initialize, ctx, ("upload", {"url": SAMPLE_URL}))
        self.assertEqual(ctx.toasts.pending, [])

    def test_upscale(self):
        self.services["upscaler"].upscale.return_value = UpscaleResult(
            name="sofa.jpg (4x)", original_url=SAMPLE_URL, output_url="https://replicate.delivery/out.png", scale=4
        )
        ctx = self.make(tab="upscaler")
        run_page(media_hub.initialize, ctx, ("upscale", {"url": SAMPLE_URL, "scale": "4"}))
        self.assertEqual(self.services["upscaler"].upscale.call_args.kwargs["scale"], 4)
        self.assertEqual(ctx.query["upscaled"], "https://replicate.delivery/out.png")
        self.assertIn("sofa.jpg (4x)", ctx.document.html("upscale_result"))

    def test_history(self):
        self.services["history"].recent.return_value = [
            MediaHistoryDTO(1, "sofa", SAMPLE_URL, "upload", "admin@ariesmall.com", "2025-10-20T09:30:00+00:00")
        ]
        ctx = self.make(tab="history")
        run_page(media_hub.initialize, ctx)
        html = ctx.document.html("history_list")
        self.assertIn("sofa", html)
        self.assertIn("20/10/2025, 09:30", html)

    def test_clear_history(self):
        ctx = self.make(tab="history")
        run_page(media_hub.initialize, ctx, ("clear-history", {}))
        self.services["history"].clear.assert_called_once_with()
        self.assertEqual(ctx.toasts.pending[-1]["title"], "History Cleared")
        self.assertIn("No history found.", ctx.document.html("history_list"))

    def test_save_config_skips_masked_secrets(self):
        ctx = self.make(tab="settings")
        run_page(
            media_hub.initialize,
            ctx,
            ("save-config", {"CLOUDINARY_CLOUD_NAME": "demo2", "TINYPNG_API_KEY": "***abcd"}),
        )
        self.services["config"].update.assert_called_once_with({"CLOUDINARY_CLOUD_NAME": "demo2"})
        self.assertEqual(ctx.document.data["config"]["TINYPNG_API_KEY"], "***abcd")


class AdminProfileTests(unittest.TestCase):
    def test_admin_email(self):
        ctx = make_admin_ctx("/profile")
        run_page(profile.initialize, ctx)
        self.assertEqual(ctx.document.html("admin_email"), "admin@ariesmall.com")

    def test_non_admin(self):
        ctx = make_admin_ctx("/profile", services=admin_services(SHOPPER))
        run_page(profile.initialize, ctx)
        self.assertEqual(ctx.document.html("admin_email"), "Unauthorized")


class AdminLoginTests(unittest.TestCase):
    def setUp(self):
        self.services = admin_services(None)
        self.sessions = self.services["sessions"]

    def test_requires_admin_flag(self):
        self.sessions.login.return_value = (None, ("FORBIDDEN", "This account does not have admin access.", None))
        ctx = make_admin_ctx("/admin-login", services=self.services)
        run_page(login.initialize, ctx, ("login", {"email": "asha@example.com", "password": "longenough"}))
        self.sessions.login.assert_called_once_with(None, "asha@example.com", "longenough", admin=True)
        self.assertEqual(ctx.document.data["errors"], {"form": "This account does not have admin access."})
        self.assertEqual(ctx.toasts.pending[-1]["title"], "Login Failed")
        self.assertIsNone(ctx.router.next_location)

    def test_success_redirects_to_dashboard(self):
        self.sessions.login.return_value = (ADMIN, None)
        ctx = make_admin_ctx("/admin-login", services=self.services)
        run_page(login.initialize, ctx, ("login", {"email": "admin@ariesmall.com", "password": "longenough"}))
        self.assertEqual(ctx.router.next_location, "/dashboard")
        self.assertEqual(ctx.toasts.pending[-1], {"type": "success", "title": "Login successful", "message": "Redirecting..."})
