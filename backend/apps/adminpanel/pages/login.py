from apps.auth.serializers import LoginRequestSerializer
from apps.storefront.document import PageContext
from apps.storefront.pages.auth import field_errors, submitted


async def initialize(ctx: PageContext) -> None:
    sessions = ctx.services["sessions"]
    ctx.set_data("values", {"email": ""})
    ctx.set_data("errors", {})

    async def login(payload):
        serializer = LoginRequestSerializer(data=submitted(payload, "email", "password"))
        ctx.set_data("values", submitted(payload, "email"))
        if not serializer.is_valid():
            ctx.set_data("errors", field_errors(serializer))
            return None
        data = serializer.validated_data
        session, error = await ctx.run_sync(
            sessions.login, ctx.request, data["email"], data["password"], admin=True
        )
        if error:
            ctx.set_data("errors", {"form": error[1]})
            ctx.toasts.show("error", "Login Failed", error[1])
            return None
        ctx.toasts.show("success", "Login successful", "Redirecting...")
        ctx.redirect("/dashboard")
        return session

    ctx.events.on("login", login)
