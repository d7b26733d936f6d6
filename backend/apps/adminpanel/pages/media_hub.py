"""Media hub: Cloudinary uploader, Replicate upscaler, history and API settings.

Results travel in the query string (``?uploaded=`` / ``?upscaled=``) so they
are still on screen after the post/redirect round trip.
"""
from django.db import DatabaseError
from django.utils.dateparse import parse_datetime

from apps.api.exceptions import ApplicationError, ExternalServiceError
from apps.common import get_logger
from apps.media.config import KNOWN_KEYS, MediaConfigError
from apps.media.serializers import (
    MediaUploadRequestSerializer,
    MediaUpscaleRequestSerializer,
    SystemConfigUpdateSerializer,
)
from apps.media.staging import InvalidStagedFile, StagingArea, stage_source
from apps.media.transforms import transform_links
from apps.media.upscaler import ALLOWED_SCALES
from apps.storefront.components import escape
from apps.storefront.document import PageContext

logger = get_logger(__name__).bind(component="adminpanel", layer="page")

TABS = ("uploader", "upscaler", "history", "settings")
MASK_PREFIX = "***"


def upload_result(name: str, url: str) -> str:
    links = "".join(
        f'<li class="transform-link"><span class="transform-link__label">{escape(link.label)}</span>'
        f'<input type="text" readonly value="{escape(link.url)}" class="transform-link__url"></li>'
        for link in transform_links(url)
    )
    return (
        f'<div class="upload-result"><p class="upload-result__name">{escape(name)}</p>'
        f'<img src="{escape(url)}" alt="{escape(name)}" class="upload-result__preview">'
        f'<ul class="transform-links">{links}</ul></div>'
    )


def upscale_result(name: str, original: str, output: str) -> str:
    return (
        f'<div class="upscale-result"><p class="upscale-result__name">{escape(name)}</p>'
        f'<div class="upscale-result__compare">'
        f'<figure><img src="{escape(original)}" alt="Original"><figcaption>Original</figcaption></figure>'
        f'<figure><img src="{escape(output)}" alt="Upscaled"><figcaption>Upscaled</figcaption></figure></div>'
        f'<input type="text" readonly value="{escape(output)}" class="upscale-result__url">'
        f'<a href="{escape(output)}" target="_blank" rel="noopener" class="action-btn">Open</a></div>'
    )


def _when(iso) -> str:
    moment = parse_datetime(iso) if iso else None
    return moment.strftime("%d/%m/%Y, %H:%M") if moment else ""


def history_list(items) -> str:
    if not items:
        return '<div class="empty-state"><p>No history found.</p></div>'
    return "".join(
        f'<div class="history-item" data-type="{escape(item.media_type)}">'
        f'<div class="history-item__left"><img src="{escape(item.thumbnail_url or item.file_url)}" alt="thumb" class="history-item__thumb">'
        f'<div class="history-item__info"><span class="history-item__name">{escape(item.file_name)}</span>'
        f'<span class="history-item__meta">{escape(item.media_type)} &bull; {_when(item.created_at)}</span></div></div>'
        f'<div class="history-item__actions"><input type="text" readonly value="{escape(item.file_url)}">'
        f'<a href="{escape(item.file_url)}" target="_blank" rel="noopener" class="action-btn">Open</a></div></div>'
        for item in items
    )


def invalid_source_toast(ctx: PageContext, payload, message: str) -> None:
    if payload.get("file") is not None:
        ctx.toasts.show("error", "Invalid File Type", message)
    else:
        ctx.toasts.show("error", "Invalid URL", "Please enter a valid image URL.")


def config_updates(payload):
    # Masked secrets come back unchanged from the form and must not overwrite the stored value.
    return {
        key: payload[key]
        for key in KNOWN_KEYS
        if key in payload and not str(payload[key]).startswith(MASK_PREFIX)
    }


async def initialize(ctx: PageContext) -> None:
    services = ctx.services
    tab = ctx.query.get("tab") if ctx.query.get("tab") in TABS else "uploader"
    session = services["sessions"].current(ctx.request)
    admin_email = session.email if session is not None else ""
    ctx.set_data("tab", tab)
    ctx.set_data("scales", ALLOWED_SCALES)
    ctx.set_data("errors", {})

    def run_upload(data):
        with StagingArea() as area:
            item = stage_source(area, data)
            return services["uploader"].upload(
                item, custom_name=data.get("custom_name", ""), admin_email=admin_email, toasts=ctx.toasts
            )

    def run_upscale(data):
        with StagingArea() as area:
            item = stage_source(area, data)
            return services["upscaler"].upscale(
                item, scale=int(data["scale"]), admin_email=admin_email, toasts=ctx.toasts
            )

    async def run_media_job(job, payload, serializer):
        if not serializer.is_valid():
            invalid_source_toast(ctx, payload, "Please choose an image file.")
            return None
        try:
            return await ctx.run_sync(job, serializer.validated_data)
        except InvalidStagedFile as exc:
            invalid_source_toast(ctx, payload, str(exc))
        except ExternalServiceError as exc:
            # The service has already queued its own toast.
            logger.warning("Media job failed upstream", tab=tab, error=exc.message)
        except MediaConfigError as exc:
            ctx.toasts.show("error", "Configuration Error", exc.message)
        except ApplicationError as exc:
            ctx.toasts.show("error", "Error", exc.message)
        return None

    async def upload(payload):
        result = await run_media_job(run_upload, payload, MediaUploadRequestSerializer(data=payload))
        if result is not None:
            ctx.query.update(tab="uploader", uploaded=result.url, name=result.name)
            ctx.render("upload_result", upload_result(result.name, result.url))
        return result

    async def upscale(payload):
        result = await run_media_job(run_upscale, payload, MediaUpscaleRequestSerializer(data=payload))
        if result is not None:
            ctx.query.update(
                tab="upscaler", upscaled=result.output_url, original=result.original_url, name=result.name
            )
            ctx.render("upscale_result", upscale_result(result.name, result.original_url, result.output_url))
        return result

    async def clear_history(payload):
        try:
            deleted = await ctx.run_sync(services["history"].clear)
        except DatabaseError:
            logger.exception("Could not clear media history")
            ctx.toasts.show("error", "Error", "Could not clear history.")
            return None
        ctx.toasts.show("success", "History Cleared")
        ctx.render("history_list", history_list([]))
        return deleted

    async def save_config(payload):
        serializer = SystemConfigUpdateSerializer(data={"values": config_updates(payload)})
        if not serializer.is_valid():
            ctx.toasts.show("error", "Error", "Could not save settings.")
            return None
        try:
            await ctx.run_sync(services["config"].update, serializer.validated_data["values"])
        except (DatabaseError, ApplicationError):
            logger.exception("Could not save media settings")
            ctx.toasts.show("error", "Error", "Could not save settings.")
            return None
        ctx.toasts.show("success", "Settings Saved", "API keys and Cloudinary details were updated.")
        return True

    if ctx.query.get("uploaded"):
        ctx.render("upload_result", upload_result(ctx.query.get("name", ""), ctx.query["uploaded"]))
    if ctx.query.get("upscaled"):
        ctx.render(
            "upscale_result",
            upscale_result(ctx.query.get("name", ""), ctx.query.get("original", ""), ctx.query["upscaled"]),
        )
    if tab == "history":
        try:
            items = await ctx.run_sync(services["history"].recent)
        except DatabaseError:
            logger.exception("Could not load media history")
            ctx.toasts.show("error", "Error", "Could not load history.")
            items = []
        ctx.render("history_list", history_list(items))
    if tab == "settings":
        try:
            ctx.set_data("config", await ctx.run_sync(services["config"].public_view))
        except ApplicationError as exc:
            ctx.toasts.show("error", "Error", exc.message)
            ctx.set_data("config", {})

    ctx.events.on("upload", upload)
    ctx.events.on("upscale", upscale)
    ctx.events.on("clear-history", clear_history)
    ctx.events.on("save-config", save_config)
