"""Product manager: the products table and the hero slides table.

``?tab=slides`` switches tables, ``?edit=<id>`` (or ``?edit=new``) opens the
form for one row and ``?q=`` filters the products table. Saving or deleting
closes the form so the redirect lands back on the list.
"""
from typing import Any, Dict, Optional

from django.db import DatabaseError

from apps.catalog.serializers import ProductWriteSerializer, SlideSerializer
from apps.storefront.components import escape, format_currency
from apps.storefront.document import CSRF_MARKER, PageContext
from apps.storefront.pages.auth import field_errors

TABS = ("products", "slides")
PRODUCT_FIELDS = (
    "name",
    "brand",
    "category",
    "price",
    "rating",
    "description",
    "image_main",
    "images_gallery",
    "features",
    "warranty",
)
SLIDE_FIELDS = (
    "title",
    "description",
    "button_text",
    "button_link",
    "image_url_desktop",
    "image_url_mobile",
    "thumbnail_url",
    "fit_desktop",
    "fit_mobile",
    "show_overlay",
    "is_active",
)
THUMB_PLACEHOLDER = "https://placehold.co/60x60/eee/aaa?text=N/A"


def _int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _delete_form(action: str, field: str, pk: int) -> str:
    return (
        f'<form method="post" class="inline-action">{CSRF_MARKER}'
        f'<input type="hidden" name="action" value="{action}" />'
        f'<input type="hidden" name="{field}" value="{pk}" />'
        f'<button class="action-btn action-btn--delete" aria-label="Delete">Delete</button></form>'
    )


def product_rows(products) -> str:
    if not products:
        return '<tr><td colspan="5" class="empty-state">No products found.</td></tr>'
    return "".join(
        f'<tr data-id="{p.id}">'
        f'<td><img src="{escape(p.image or THUMB_PLACEHOLDER)}" alt="{escape(p.name)}" class="product-table__image"></td>'
        f"<td>{escape(p.name)}</td><td>{escape(p.category)}</td><td>{format_currency(p.price)}</td>"
        f'<td class="product-table__actions"><a class="action-btn action-btn--edit" href="?edit={p.id}">Edit</a>'
        f'{_delete_form("delete-product", "product_id", p.id)}</td></tr>'
        for p in products
    )


def slide_rows(slides) -> str:
    if not slides:
        return '<tr><td colspan="4" class="empty-state">No slides found. Add one to get started!</td></tr>'
    return "".join(
        f'<tr data-id="{s.id}">'
        f'<td><img src="{escape(s.thumbnail_url or s.image_url_desktop or THUMB_PLACEHOLDER)}" '
        f'alt="{escape(s.title)}" class="product-table__image"></td>'
        f"<td>{escape(s.title or '(untitled)')}</td>"
        f'<td><span class="status-badge status-badge--{"active" if s.is_active else "inactive"}">'
        f'{"Active" if s.is_active else "Inactive"}</span></td>'
        f'<td class="product-table__actions"><a class="action-btn action-btn--edit" href="?tab=slides&amp;edit={s.id}">Edit</a>'
        f'{_delete_form("delete-slide", "slide_id", s.id)}</td></tr>'
        for s in slides
    )


def product_form_values(product=None) -> Dict[str, str]:
    """Flatten a product into the form's text inputs."""
    if product is None:
        return {name: "" for name in PRODUCT_FIELDS}
    return {
        "name": product.name,
        "brand": product.brand,
        "category": product.category,
        "price": f"{product.price:.2f}",
        "rating": str(product.rating),
        "description": product.description,
        "image_main": product.images[0] if product.images else "",
        "images_gallery": ", ".join(product.images[1:]),
        "features": ", ".join(product.features),
        "warranty": product.warranty,
    }


def slide_form_values(slide=None) -> Dict[str, str]:
    if slide is None:
        values = {name: "" for name in SLIDE_FIELDS}
        values.update(fit_desktop="cover", fit_mobile="cover", show_overlay="true", is_active="true")
        return values
    values = {name: getattr(slide, name) for name in SLIDE_FIELDS}
    values["show_overlay"] = "true" if slide.show_overlay else "false"
    values["is_active"] = "true" if slide.is_active else "false"
    return values


def product_payload(payload) -> Dict[str, Any]:
    # Blank optional numbers mean "not given" rather than invalid input.
    data = {name: payload[name] for name in PRODUCT_FIELDS if name in payload}
    if not str(data.get("rating", "")).strip():
        data.pop("rating", None)
    return data


def _save_error_message(error) -> str:
    message = error[1]
    if message.startswith("Could not save product"):
        return message
    return f"Could not save product: {message}"


async def initialize(ctx: PageContext) -> None:
    products = ctx.services["products"]
    slides = ctx.services["slides"]
    tab = ctx.query.get("tab") if ctx.query.get("tab") in TABS else "products"
    ctx.set_data("tab", tab)
    ctx.set_data("search", ctx.query.get("q", ""))
    ctx.set_data("errors", {})

    async def render_products():
        rows = await ctx.run_sync(products.list_products, ctx.query.get("q"))
        ctx.render("product_table", product_rows(rows))
        return rows

    async def render_slides():
        rows = await ctx.run_sync(slides.list_slides)
        ctx.render("slide_table", slide_rows(rows))
        return rows

    def close_form():
        ctx.query.pop("edit", None)
        ctx.set_data("form", None)

    def reopen_form(kind, payload, serializer, heading):
        pk = payload.get(f"{kind}_id") or ""
        ctx.set_data("errors", field_errors(serializer))
        ctx.set_data("form", {"kind": kind, "id": pk, "heading": heading, "values": dict(payload)})

    async def save_product(payload):
        pk = _int(payload.get("product_id"))
        serializer = ProductWriteSerializer(data=product_payload(payload))
        if not serializer.is_valid():
            reopen_form("product", payload, serializer, "Edit Product" if pk else "Add New Product")
            ctx.toasts.show("error", "Error", "Could not save product: please check the highlighted fields.")
            return None
        try:
            if pk is None:
                dto, error = await ctx.run_sync(products.create_product, serializer.validated_data)
            else:
                dto, error = await ctx.run_sync(products.update_product, pk, serializer.validated_data, False)
        except DatabaseError as exc:
            error = ("DATABASE_ERROR", str(exc), None)
            dto = None
        if error:
            ctx.toasts.show("error", "Error", _save_error_message(error))
            return None
        ctx.toasts.show("success", "Success", f"Product successfully {'updated' if pk else 'created'}.")
        close_form()
        await render_products()
        return dto

    async def delete_product(payload):
        pk = _int(payload.get("product_id"))
        try:
            deleted, error = await ctx.run_sync(products.delete_product, pk)
        except DatabaseError:
            deleted, error = False, ("DATABASE_ERROR", "delete failed", None)
        if pk is None or error:
            ctx.toasts.show("error", "Error", "Could not delete product.")
            return False
        ctx.toasts.show("success", "Success", "Product deleted.")
        close_form()
        await render_products()
        return deleted

    async def save_slide(payload):
        pk = _int(payload.get("slide_id"))
        data = {name: payload[name] for name in SLIDE_FIELDS if name in payload}
        serializer = SlideSerializer(data=data, partial=pk is not None)
        if not serializer.is_valid():
            reopen_form("slide", payload, serializer, "Edit Slide" if pk else "Add New Slide")
            ctx.toasts.show("error", "Error", "Could not save slide: please check the highlighted fields.")
            return None
        try:
            if pk is None:
                dto, error = await ctx.run_sync(slides.create_slide, serializer.validated_data), None
            else:
                dto, error = await ctx.run_sync(slides.update_slide, pk, serializer.validated_data)
        except DatabaseError as exc:
            dto, error = None, ("DATABASE_ERROR", str(exc), None)
        if error:
            ctx.toasts.show("error", "Error", f"Could not save slide: {error[1]}")
            return None
        ctx.toasts.show("success", "Success", f"Slide successfully {'updated' if pk else 'created'}.")
        close_form()
        await render_slides()
        return dto

    async def delete_slide(payload):
        pk = _int(payload.get("slide_id"))
        try:
            deleted, error = await ctx.run_sync(slides.delete_slide, pk)
        except DatabaseError:
            deleted, error = False, ("DATABASE_ERROR", "delete failed", None)
        if pk is None or error:
            ctx.toasts.show("error", "Error", "Could not delete slide.")
            return False
        ctx.toasts.show("success", "Success", "Slide deleted successfully.")
        close_form()
        await render_slides()
        return deleted

    product_list = await render_products()
    slide_list = await render_slides()

    editing = ctx.query.get("edit")
    form = None
    if editing and tab == "products":
        current = next((p for p in product_list if str(p.id) == editing), None)
        if editing == "new" or current is not None:
            form = {
                "kind": "product",
                "id": current.id if current else "",
                "heading": "Edit Product" if current else "Add New Product",
                "values": product_form_values(current),
            }
    elif editing and tab == "slides":
        current = next((s for s in slide_list if str(s.id) == editing), None)
        if editing == "new" or current is not None:
            form = {
                "kind": "slide",
                "id": current.id if current else "",
                "heading": "Edit Slide" if current else "Add New Slide",
                "values": slide_form_values(current),
            }
    ctx.set_data("form", form)

    ctx.events.on("save-product", save_product)
    ctx.events.on("delete-product", delete_product)
    ctx.events.on("save-slide", save_slide)
    ctx.events.on("delete-slide", delete_slide)
