"""Sign-in and sign-up pages.

Both reuse the API's request serializers so form and JSON clients see the
same validation messages.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from apps.auth.serializers import LoginRequestSerializer, SignupRequestSerializer
from apps.carts.dtos import StoreSession
from ..document import PageContext


def field_errors(serializer) -> Dict[str, str]:
    return {name: str(messages[0]) for name, messages in serializer.errors.items()}


def submitted(payload: Mapping[str, Any], *names: str) -> Dict[str, str]:
    # Passwords are never echoed back into the form.
    return {name: str(payload.get(name) or "") for name in names}


def store_session(session) -> StoreSession:
    return StoreSession(user_id=session.user_id, email=session.email, display_name=session.display_name)


async def _signed_in(ctx: PageContext, session, title: str, message: str) -> None:
    await ctx.run_sync(ctx.store.on_session_change, store_session(session))
    ctx.toasts.show("success", title, message)
    ctx.redirect("/")


async def initialize_login(ctx: PageContext) -> None:
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
        session, error = await ctx.run_sync(sessions.login, ctx.request, data["email"], data["password"])
        if error:
            ctx.set_data("errors", {"form": error[1]})
            ctx.toasts.show("error", "Login Failed", error[1])
            return None
        await _signed_in(ctx, session, "Login Successful", f"Welcome Back, {session.display_name}!")
        return session

    ctx.events.on("login", login)


async def initialize_signup(ctx: PageContext) -> None:
    sessions = ctx.services["sessions"]
    registration = ctx.services["registration"]
    ctx.set_data("values", {"full_name": "", "email": ""})
    ctx.set_data("errors", {})

    async def signup(payload):
        serializer = SignupRequestSerializer(data=submitted(payload, "full_name", "email", "password"))
        ctx.set_data("values", submitted(payload, "full_name", "email"))
        if not serializer.is_valid():
            ctx.set_data("errors", field_errors(serializer))
            return None
        user, error = await ctx.run_sync(registration.signup, serializer.validated_data)
        if error:
            ctx.set_data("errors", {"email": error[1]})
            ctx.toasts.show("error", "Signup Failed", error[1])
            return None
        session = await ctx.run_sync(sessions.start, ctx.request, user)
        await _signed_in(ctx, session, "Account Created!", "Welcome to Aries Mall!")
        return session

    ctx.events.on("signup", signup)
