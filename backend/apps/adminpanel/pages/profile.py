from apps.storefront.components import escape
from apps.storefront.document import PageContext


async def initialize(ctx: PageContext) -> None:
    session = ctx.services["sessions"].current(ctx.request)
    if session is not None and session.is_admin:
        ctx.render("admin_email", escape(session.email))
    else:
        ctx.render("admin_email", "Unauthorized")
