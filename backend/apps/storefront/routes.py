from .router import DynamicRoute, Route, guest_only, legacy_redirects, protected_prefixes
from .pages import auth, cart, category, home, product, profile, search

LOGIN_PATH = "/login"
PROFILE_PATH = "/profile"

PRODUCT_ROUTE = Route("product", "storefront/pages/product.html", product.initialize, "Product | Aries Mall")
CATEGORY_ROUTE = Route("category", "storefront/pages/category.html", category.initialize, "Category | Aries Mall")
PROFILE_ROUTE = Route("profile", "storefront/pages/profile.html", profile.initialize, "My Account | Aries Mall")

ROUTES = {
    "/": Route("home", "storefront/pages/home.html", home.initialize, "Aries Mall"),
    "/cart": Route("cart", "storefront/pages/cart.html", cart.initialize, "Shopping Cart | Aries Mall"),
    LOGIN_PATH: Route("login", "storefront/pages/login.html", auth.initialize_login, "Sign In | Aries Mall"),
    "/signup": Route("signup", "storefront/pages/signup.html", auth.initialize_signup, "Create Account | Aries Mall"),
    "/search": Route("search", "storefront/pages/search.html", search.initialize, "Search | Aries Mall"),
}

DYNAMIC_ROUTES = (
    DynamicRoute("/product/", "id", PRODUCT_ROUTE),
    DynamicRoute("/category/", "slug", CATEGORY_ROUTE),
    DynamicRoute("/profile/", "subview", PROFILE_ROUTE, optional=True),
)

GUARDS = (
    protected_prefixes(
        [PROFILE_PATH],
        LOGIN_PATH,
        ("info", "Access Denied", "Please sign in to view this page."),
    ),
    guest_only([LOGIN_PATH, "/signup"], PROFILE_PATH),
    legacy_redirects({"/wishlist": "/profile/wishlist"}),
)
