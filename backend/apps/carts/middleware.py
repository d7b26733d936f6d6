from django.utils.functional import SimpleLazyObject

from .container import build_shop_store


def get_shop_store(request, listeners=()):
    """Build and hydrate the store; ``listeners`` subscribe before hydration so fetch failures reach them."""
    store = build_shop_store(request)
    for listener in listeners:
        store.subscribe(listener)
    store.initialize()
    return store


class ShopStoreMiddleware:
    """Attaches a lazily initialized ``ShopStore`` as ``request.shop_store``.

    Must run after the session and authentication middleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.shop_store = SimpleLazyObject(lambda: get_shop_store(request))
        return self.get_response(request)
