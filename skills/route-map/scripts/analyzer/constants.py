from __future__ import annotations

EXCLUDE_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".angular",
    ".cache",
    ".next",
    ".nuxt",
    ".output",
    ".turbo",
    ".vercel",
    ".code-state",
    "node_modules",
    "bower_components",
    "dist",
    "build",
    "out",
    "coverage",
    "tmp",
    "workspace",
}

CODE_EXTS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
MARKUP_EXTS = (".html", ".htm")

ROUTEMAP_CONFIG_FILES = (".routemap.json", "routemap.json")

# Composition roots, checked in order; the second is the legacy module bootstrap.
ANGULAR_ROOT_FILES = ("app.config.ts", "app.module.ts")

ANGULAR_ROUTER_CALLS = (
    "provideRouter",
    "RouterModule.forRoot",
    "RouterModule.forChild",
)

REACT_ROUTER_CALLS = (
    "createBrowserRouter",
    "createHashRouter",
    "createMemoryRouter",
    "useRoutes",
)

ROUTE_KEYS = ("path", "component", "loadComponent", "loadChildren", "redirectTo", "children")
REACT_ROUTE_KEYS = ("path", "index", "element", "Component", "component", "lazy", "children")

GUARD_KEYS = ("canActivate", "canActivateChild", "canMatch", "canLoad")

LAZY_SUFFIXES = ("", ".ts", ".module.ts", ".routes.ts")
LAZY_ROOT_FALLBACKS = ("src", "src/app")

# Suffixes removed when deriving a component name from a file name.
FILE_NAME_SUFFIXES = (
    ".component",
    ".service",
    ".module",
    ".routing",
    ".routes",
    ".page",
    ".guard",
    ".resolver",
    ".directive",
    ".pipe",
    ".config",
    ".view",
)

COMPONENT_SUFFIXES = ("Component", "Page", "View")

ANGULAR_NAVIGATION_CALLS = ("router.navigate", "router.navigateByUrl")
ANGULAR_GUARD_NAVIGATION_CALLS = ("router.createUrlTree", "router.parseUrl")
REACT_NAVIGATION_CALLS = (
    "history.push",
    "history.replace",
    "router.push",
    "router.replace",
)
REACT_NAVIGATION_FUNCTIONS = ("navigate", "redirect")

GUARD_INTERFACES = ("CanActivate", "CanActivateChild", "CanMatch", "CanLoad", "CanDeactivate")
GUARD_FN_TYPES = ("CanActivateFn", "CanActivateChildFn", "CanMatchFn", "CanDeactivateFn")

LINK_TAGS = ("Link", "NavLink")

MENU_PATH_TOKENS = ("nav", "menu", "sidebar", "header")
MENU_TITLE_KEYS = ("title", "label", "name")
MENU_PATH_KEYS = ("path", "href", "to", "url")
MENU_CHILD_KEYS = ("children", "items", "submenu")

LABEL_MAX_CHARS = 40

# package.json dependency -> routing library, checked in order.
ROUTER_LIBRARY_PACKAGES = (
    ("next", "next"),
    ("gatsby", "gatsby"),
    ("@remix-run/react", "remix"),
    ("react-router-dom", "react-router"),
    ("react-router", "react-router"),
    ("@tanstack/react-router", "tanstack-router"),
    ("@reach/router", "reach-router"),
)

NEXT_PAGES_ROOTS = ("pages/", "src/pages/")
NEXT_APP_ROOTS = ("app/", "src/app/")
GATSBY_PAGES_ROOTS = ("src/pages/",)
REMIX_ROUTES_ROOTS = ("app/routes/",)
PAGE_EXTS = (".js", ".jsx", ".ts", ".tsx")

TANSTACK_ROUTE_CALLS = ("createRoute", "createRootRoute")
TANSTACK_FILE_ROUTE_CALL = "createFileRoute"
REACH_ROUTER_CONTAINER = "Router"
