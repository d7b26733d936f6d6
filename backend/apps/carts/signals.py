from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import receiver
from django.utils.functional import empty

from apps.common import get_logger
from .container import session_from_user

logger = get_logger(__name__).bind(component="carts", layer="signals")


def _store_for(request):
    store = getattr(request, "shop_store", None) if request is not None else None
    # A lazy store nobody touched yet will hydrate for the new identity on first use.
    if store is None or getattr(store, "_wrapped", None) is empty:
        return None
    return store


@receiver(user_logged_in, dispatch_uid="carts.store_login")
def store_on_login(sender, request, user, **kwargs):
    store = _store_for(request)
    if store is not None and store.on_session_change(session_from_user(user)):
        logger.debug("Store switched to account", user_id=user.id)


@receiver(user_logged_out, dispatch_uid="carts.store_logout")
def store_on_logout(sender, request, user, **kwargs):
    store = _store_for(request)
    if store is not None and store.on_session_change(None):
        logger.debug("Store switched to guest")
