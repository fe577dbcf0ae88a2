import unittest
from pathlib import Path
import sys
import os
import tempfile

# Add scripts/ to path to import modules
sys.path.append(os.path.join(os.path.dirname(__file__), "../scripts"))

from analyzer import (
    AnalyzeOptions,
    RouteCollection,
    SourceProject,
    analyze_project,
    bound_target,
    component_name_from_file,
    detect_framework,
    detect_router_library,
    extract_file_flows,
    extract_flows,
    extract_menus,
    file_route_entries,
    gatsby_path,
    join_command_segments,
    join_path,
    kebab_to_pascal,
    list_project_files,
    load_repo_config,
    markup_targets,
    nextjs_app_path,
    nextjs_pages_path,
    normalize_path,
    placeholder_for,
    remix_path,
    resolve_lazy_target,
    resolve_react_routes,
    resolve_routes,
    resolve_ts_module,
    route_component_name,
    tanstack_path,
    truncate_label,
)
from ir import Route


def write_file(root: Path, rel_path: str, content: str) -> None:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def load_project(root: Path, warnings=None) -> SourceProject:
    files = list_project_files(root)
    return SourceProject(root, files, warnings=warnings if warnings is not None else [])


APP_CONFIG = """\
import { ApplicationConfig } from '@angular/core';
import { provideRouter } from '@angular/router';
import { routes } from './app.routes';

export const appConfig: ApplicationConfig = {
  providers: [provideRouter(routes)]
};
"""

APP_ROUTES = """\
import { Routes } from '@angular/router';
import { HomeComponent } from './home/home.component';
import { AboutComponent } from './about/about.component';
import { AuthGuard } from './auth.guard';

export const routes: Routes = [
  { path: '', component: HomeComponent },
  { path: 'home', redirectTo: '', pathMatch: 'full' },
  { path: 'about/:id', component: AboutComponent, canActivate: [AuthGuard], data: { title: 'About', depth: 2 } },
  { path: 'a', component: AComponent, children: [
    { path: 'b', component: BComponent, children: [
      { path: 'c', component: CComponent }
    ]}
  ]},
  { path: 'feature', loadChildren: () => import('./feature/feature.routes').then(m => m.FEATURE_ROUTES) },
  { path: 'detail', loadComponent: () => import('./detail/standalone-detail.component').then(m => m.StandaloneDetailComponent) },
  { path: 'legacy', loadComponent: () => import('./legacy/legacy-page.component') },
  { path: '**', redirectTo: '' }
];
"""

FEATURE_ROUTES = """\
import { Routes } from '@angular/router';

export const FEATURE_ROUTES: Routes = [
  { path: '', component: FeatureHomeComponent },
  { path: 'list', component: FeatureListComponent },
  { path: 'again', loadChildren: () => import('./feature.routes').then(m => m.FEATURE_ROUTES) },
];
"""

HOME_COMPONENT = """\
import { Component } from '@angular/core';
import { Router } from '@angular/router';

@Component({
  selector: 'app-home',
  templateUrl: './home.component.html',
})
export class HomeComponent {
  constructor(private router: Router) {}

  openAbout(item: { id: string }) {
    if (item.id) {
      this.router.navigate(['/about', item.id]);
    }
  }

  goHome() {
    // back to the landing page
    this.router.navigateByUrl('/home');
  }

  goAbout() {
    this.router.navigate(['/about', '123']);
  }
}
"""

HOME_TEMPLATE = """\
<a routerLink="/about/42">About</a>
<a [routerLink]="['/a', 'b']">B</a>
<a routerLink="feature/">Feature</a>
<a href="https://example.com">External</a>
"""


def write_angular_app(root: Path) -> None:
    write_file(root, "src/app/app.config.ts", APP_CONFIG)
    write_file(root, "src/app/app.routes.ts", APP_ROUTES)
    write_file(root, "src/app/feature/feature.routes.ts", FEATURE_ROUTES)
    write_file(root, "src/app/home/home.component.ts", HOME_COMPONENT)
    write_file(root, "src/app/home/home.component.html", HOME_TEMPLATE)


class TestPaths(unittest.TestCase):
    def test_join_path(self):
        self.assertEqual(join_path("/", ""), "/")
        self.assertEqual(join_path("/", "about"), "/about")
        self.assertEqual(join_path("/feature", ""), "/feature")
        self.assertEqual(join_path("/feature", "list/"), "/feature/list")
        self.assertEqual(join_path("/feature", "/absolute"), "/absolute")
        self.assertEqual(join_path("/a//", "b"), "/a/b")

    def test_normalize_is_idempotent(self):
        for value in ["", "/", "a", "//a//b/", "/a/b", "a/:id/", "///", "/x/**"]:
            once = normalize_path(value)
            self.assertEqual(normalize_path(once), once)
            self.assertTrue(once.startswith("/"))
            self.assertNotIn("//", once)

    def test_join_command_segments(self):
        self.assertEqual(join_command_segments(["/about", "123"]), "/about/123")
        self.assertEqual(join_command_segments(["/about/", "/123"]), "/about/123")
        self.assertEqual(join_command_segments(["child", "", "/x/"]), "child/x")
        self.assertEqual(join_command_segments([]), "")


class TestNaming(unittest.TestCase):
    def test_component_name_pairs(self):
        self.assertEqual(kebab_to_pascal("user-profile.component.ts"), "UserProfile")
        self.assertEqual(kebab_to_pascal("lazy-feature.routes"), "LazyFeature")
        self.assertEqual(kebab_to_pascal("admin-routing.module.ts"), "AdminRouting")
        self.assertEqual(kebab_to_pascal("auth.guard"), "Auth")
        self.assertEqual(component_name_from_file("./legacy/legacy-page.component"), "LegacyPage")
        self.assertEqual(component_name_from_file("./pages/settings-page"), "SettingsPage")
        self.assertEqual(component_name_from_file("./pages/profile/index.tsx"), "Profile")

    def test_placeholder_heuristic(self):
        self.assertEqual(placeholder_for("item.id"), ":id")
        self.assertEqual(placeholder_for("this.userId"), ":id")
        self.assertEqual(placeholder_for("slug"), ":slug")
        self.assertEqual(placeholder_for("item.name"), ":itemname")
        self.assertEqual(placeholder_for("()"), ":param")

    def test_truncate_label(self):
        self.assertEqual(truncate_label("short"), "short")
        long = "x" * 50
        self.assertEqual(truncate_label(long), "x" * 37 + "...")
        self.assertIsNone(truncate_label("   "))


class TestRouteCollection(unittest.TestCase):
    def test_rejects_information_free_route(self):
        collection = RouteCollection([])
        self.assertFalse(collection.add(Route(path="", full_path="/")))
        self.assertEqual(len(collection), 0)

    def test_merges_complementary_fields(self):
        warnings = []
        collection = RouteCollection(warnings)
        collection.add(Route(path="settings", full_path="/settings", component="SettingsComponent"))
        collection.add(Route(path="settings", full_path="/settings", load_children="./settings/settings.routes"))
        routes = collection.routes()
        self.assertEqual(len(routes), 1)
        self.assertEqual(routes[0].component, "SettingsComponent")
        self.assertEqual(routes[0].load_children, "./settings/settings.routes")
        self.assertEqual(warnings, [])

    def test_conflicting_fields_keep_first(self):
        warnings = []
        collection = RouteCollection(warnings)
        collection.add(Route(path="settings", full_path="/settings", component="SettingsComponent"))
        collection.add(Route(path="settings", full_path="/settings", component="OtherComponent"))
        routes = collection.routes()
        self.assertEqual(len(routes), 1)
        self.assertEqual(routes[0].component, "SettingsComponent")
        self.assertEqual(len(warnings), 1)
        self.assertTrue(warnings[0].startswith("Ambiguous route: /settings"))

    def test_identical_duplicate_is_silent(self):
        warnings = []
        collection = RouteCollection(warnings)
        self.assertTrue(collection.add(Route(path="x", full_path="/x", component="X")))
        self.assertFalse(collection.add(Route(path="x", full_path="/x", component="X")))
        self.assertEqual(len(collection), 1)
        self.assertEqual(warnings, [])

    def test_component_prefers_longer_path(self):
        collection = RouteCollection([])
        collection.add(Route(path="users", full_path="/users", component="UsersComponent"))
        collection.add(Route(path="list", full_path="/admin/users/list", component="UsersComponent"))
        collection.add(Route(path="u", full_path="/u", component="UsersComponent"))
        self.assertEqual([route.full_path for route in collection.routes()], ["/admin/users/list"])

    def test_component_supersedes_catch_all(self):
        collection = RouteCollection([])
        collection.add(Route(path="**", full_path="/**", component="NotFoundComponent"))
        collection.add(Route(path="404", full_path="/404", component="NotFoundComponent"))
        self.assertEqual([route.full_path for route in collection.routes()], ["/404"])

    def test_single_root(self):
        collection = RouteCollection([])
        collection.add(Route(path="", full_path="/", component="A", is_root=True))
        collection.add(Route(path="b", full_path="/b", component="B", is_root=True))
        self.assertEqual([route.full_path for route in collection.routes() if route.is_root], ["/"])

    def test_wildcard_never_supersedes_concrete_route(self):
        collection = RouteCollection([])
        collection.add(Route(path="", full_path="/", component="HomeComponent", is_root=True))
        self.assertFalse(collection.add(Route(path="**", full_path="/**", component="HomeComponent")))
        routes = collection.routes()
        self.assertEqual([route.full_path for route in routes], ["/"])
        self.assertTrue(routes[0].is_root)


class TestModuleResolution(unittest.TestCase):
    def test_resolve_ts_module(self):
        files = {"src/utils.ts", "src/components/Button.tsx", "src/index.ts"}
        self.assertEqual(resolve_ts_module("./utils", "src/main.ts", files), "src/utils.ts")
        self.assertEqual(resolve_ts_module("./utils.ts", "src/main.ts", files), "src/utils.ts")
        self.assertEqual(resolve_ts_module("../index", "src/components/Button.tsx", files), "src/index.ts")
        self.assertIsNone(resolve_ts_module("./missing", "src/main.ts", files))
        self.assertIsNone(resolve_ts_module("@angular/router", "src/main.ts", files))

    def test_resolve_ts_module_alias(self):
        files = {"src/app/shared/routes.ts"}
        alias_config = {"baseUrl": ".", "paths": {"@app/*": ["src/app/*"]}}
        self.assertEqual(
            resolve_ts_module("@app/shared/routes", "src/main.ts", files, alias_config=alias_config),
            "src/app/shared/routes.ts",
        )

    def test_resolve_lazy_target_variants(self):
        files = {
            "src/app/admin/admin.module.ts",
            "src/app/admin/admin-routing.module.ts",
            "src/app/users/index.ts",
            "src/app/orders/orders.routes.ts",
            "src/app/reports/reports.routes.ts",
        }
        importer = "src/app/app.routes.ts"
        self.assertEqual(
            resolve_lazy_target("./admin/admin.module#AdminModule", importer, files),
            "src/app/admin/admin-routing.module.ts",
        )
        self.assertEqual(resolve_lazy_target("./users", importer, files), "src/app/users/index.ts")
        self.assertEqual(resolve_lazy_target("./orders", importer, files), "src/app/orders/orders.routes.ts")
        self.assertEqual(resolve_lazy_target("./reports/reports", importer, files), "src/app/reports/reports.routes.ts")
        self.assertEqual(
            resolve_lazy_target("app/orders/orders", "lib/other.ts", files),
            "src/app/orders/orders.routes.ts",
        )
        self.assertIsNone(resolve_lazy_target("./missing", importer, files))


class TestAngularRoutes(unittest.TestCase):
    def test_routes_from_composition_root(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_angular_app(root)
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            routes = {route.full_path: route for route in ctx.collection.routes()}

            self.assertIn("/", routes)
            self.assertTrue(routes["/"].is_root)
            self.assertEqual(routes["/"].component, "HomeComponent")
            self.assertEqual(routes["/home"].redirect_to, "")
            self.assertEqual(routes["/home"].path_match, "full")
            self.assertEqual(routes["/about/:id"].guards, ["AuthGuard"])
            self.assertEqual(routes["/about/:id"].data, {"title": "About", "depth": "2"})
            self.assertEqual(routes["/a/b/c"].component, "CComponent")
            self.assertEqual(routes["/detail"].component, "StandaloneDetailComponent")
            self.assertEqual(routes["/legacy"].component, "LegacyPage")
            self.assertIn("/**", routes)

            # Lazy module expanded under its parent and merged into the parent entry.
            self.assertEqual(routes["/feature"].load_children, "./feature/feature.routes")
            self.assertEqual(routes["/feature"].component, "FeatureHomeComponent")
            self.assertEqual(routes["/feature/list"].component, "FeatureListComponent")
            self.assertIn("/feature/again", routes)
            self.assertNotIn("/feature/again/list", routes)

            for route in ctx.collection.routes():
                self.assertTrue(route.full_path.startswith("/"))
                self.assertNotIn("//", route.full_path)
                self.assertEqual(route.children, [])
            self.assertEqual(sum(1 for route in ctx.collection.routes() if route.is_root), 1)

            self.assertEqual(len(ctx.expansion_log), len(set(ctx.expansion_log)))
            self.assertEqual(ctx.expansion_log, [("src/app/feature/feature.routes.ts", "/feature")])

    def test_nested_routes_use_parent_full_path(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/app.config.ts",
                "export const config = { providers: [provideRouter([\n"
                "  { path: 'a', component: A, children: [\n"
                "    { path: 'b', component: B, children: [ { path: 'c', component: C } ] }\n"
                "  ] }\n"
                "])] };\n",
            )
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            self.assertEqual([route.full_path for route in ctx.collection.routes()], ["/a", "/a/b", "/a/b/c"])

    def test_duplicate_lazy_pair_expands_once(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/app.routes.ts",
                "export const routes = [\n"
                "  { path: 'settings', component: SettingsComponent },\n"
                "  { path: 'settings', loadChildren: () => import('./settings/settings.routes') },\n"
                "  { path: 'settings', loadChildren: () => import('./settings/settings.routes') },\n"
                "];\n",
            )
            write_file(
                root,
                "src/app/app.config.ts",
                "import { routes } from './app.routes';\n"
                "export const appConfig = { providers: [provideRouter(routes)] };\n",
            )
            write_file(
                root,
                "src/app/settings/settings.routes.ts",
                "export default [ { path: 'profile', component: ProfileComponent } ];\n",
            )
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            routes = {route.full_path: route for route in ctx.collection.routes()}
            self.assertEqual(routes["/settings"].component, "SettingsComponent")
            self.assertEqual(routes["/settings"].load_children, "./settings/settings.routes")
            self.assertIn("/settings/profile", routes)
            self.assertEqual(ctx.expansion_log, [("src/app/settings/settings.routes.ts", "/settings")])
            self.assertFalse(any(w.startswith("Ambiguous route") for w in warnings))

    def test_legacy_module_bootstrap(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/app.module.ts",
                "import { NgModule } from '@angular/core';\n"
                "import { BrowserModule } from '@angular/platform-browser';\n"
                "import { AppRoutingModule } from './app-routing.module';\n\n"
                "@NgModule({\n"
                "  declarations: [AppComponent],\n"
                "  imports: [BrowserModule, AppRoutingModule],\n"
                "})\n"
                "export class AppModule {}\n",
            )
            write_file(
                root,
                "src/app/app-routing.module.ts",
                "import { NgModule } from '@angular/core';\n"
                "import { RouterModule, Routes } from '@angular/router';\n\n"
                "const routes: Routes = [\n"
                "  { path: 'admin', loadChildren: './admin/admin.module#AdminModule' },\n"
                "  { path: 'settings', component: SettingsComponent },\n"
                "];\n\n"
                "@NgModule({\n"
                "  imports: [RouterModule.forRoot(routes)],\n"
                "  exports: [RouterModule],\n"
                "})\n"
                "export class AppRoutingModule {}\n",
            )
            write_file(root, "src/app/admin/admin.module.ts", "export class AdminModule {}\n")
            write_file(
                root,
                "src/app/admin/admin-routing.module.ts",
                "import { RouterModule } from '@angular/router';\n"
                "export const AdminRouting = RouterModule.forChild([\n"
                "  { path: '', component: AdminHomeComponent },\n"
                "  { path: 'users', component: AdminUsersComponent },\n"
                "]);\n",
            )
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            routes = {route.full_path: route for route in ctx.collection.routes()}
            self.assertEqual(routes["/admin"].load_children, "./admin/admin.module#AdminModule")
            self.assertEqual(routes["/admin"].component, "AdminHomeComponent")
            self.assertEqual(routes["/admin/users"].component, "AdminUsersComponent")
            self.assertEqual(routes["/settings"].component, "SettingsComponent")

    def test_missing_root_and_unresolved_targets_warn(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, "src/app/other.ts", "export const x = 1;\n")
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            self.assertEqual(len(ctx.collection), 0)
            self.assertTrue(any(w.startswith("No composition root found") for w in warnings))

        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/app.config.ts",
                "const dynamicPath = 'x';\n"
                "export const appConfig = { providers: [provideRouter([\n"
                "  { path: 'gone', loadChildren: () => import('./gone/gone.routes') },\n"
                "  { path: dynamicPath, component: DynamicComponent },\n"
                "  { title: 'not a route' },\n"
                "])] };\n",
            )
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            self.assertEqual([route.full_path for route in ctx.collection.routes()], ["/gone"])
            self.assertTrue(any(w.startswith("Unresolved reference: lazy module './gone/gone.routes'") for w in warnings))
            self.assertTrue(any(w.startswith("Non-literal route path skipped") for w in warnings))

    def test_children_by_reference(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/app.config.ts",
                "import { ADMIN_ROUTES } from './admin/admin.routes';\n"
                "const settingsChildren: Routes = [\n"
                "  { path: 'profile', component: ProfileComponent },\n"
                "];\n"
                "export const config = { providers: [provideRouter([\n"
                "  { path: 'settings', component: SettingsComponent, children: settingsChildren },\n"
                "  { path: 'admin', component: AdminComponent, children: ADMIN_ROUTES },\n"
                "])] };\n",
            )
            write_file(
                root,
                "src/app/admin/admin.routes.ts",
                "export const ADMIN_ROUTES: Routes = [\n  { path: 'users', component: AdminUsersComponent },\n];\n",
            )
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            self.assertEqual(
                [(route.full_path, route.component) for route in ctx.collection.routes()],
                [
                    ("/settings", "SettingsComponent"),
                    ("/settings/profile", "ProfileComponent"),
                    ("/admin", "AdminComponent"),
                    ("/admin/users", "AdminUsersComponent"),
                ],
            )
            self.assertEqual(warnings, [])

    def test_spread_and_reexported_tables(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/app.config.ts",
                "import { APP_ROUTES } from './routes';\n"
                "export const config = { providers: [provideRouter(APP_ROUTES)] };\n",
            )
            write_file(root, "src/app/routes/index.ts", "export { routes as APP_ROUTES } from './app.routes';\n")
            write_file(
                root,
                "src/app/routes/app.routes.ts",
                "import { featureRoutes, extraRoutes } from './feature';\n"
                "export const routes: Routes = [\n"
                "  { path: '', component: HomeComponent },\n"
                "  ...featureRoutes,\n"
                "  { path: 'more', component: MoreComponent, children: extraRoutes },\n"
                "];\n",
            )
            write_file(root, "src/app/routes/feature/index.ts", "export * from './feature.routes';\n")
            write_file(
                root,
                "src/app/routes/feature/feature.routes.ts",
                "export const featureRoutes: Routes = [{ path: 'feature', component: FeatureComponent }];\n"
                "export const extraRoutes: Routes = [{ path: 'extra', component: ExtraComponent }];\n",
            )
            warnings = []
            ctx = resolve_routes(load_project(root, warnings), warnings)
            self.assertEqual(
                [route.full_path for route in ctx.collection.routes()],
                ["/", "/feature", "/more", "/more/extra"],
            )
            self.assertEqual(ctx.collection.get("/feature").component, "FeatureComponent")
            self.assertTrue(ctx.collection.get("/").is_root)
            self.assertEqual(warnings, [])


REACT_MAIN = """\
import { createBrowserRouter, Navigate } from 'react-router-dom';

export const router = createBrowserRouter([
  { path: '/', element: <Layout />, children: [
    { path: 'users/:userId', element: <UserProfile /> },
    { path: 'settings', lazy: () => import('./pages/settings-page') },
    { path: 'old', element: <Navigate to="/users/1" /> },
    { path: 'about', children: [ { index: true, element: <About /> } ] },
  ]},
]);
"""

REACT_HOME = """\
import { Link, useNavigate } from 'react-router-dom';

export default function Home() {
  const go = useNavigate();
  const openUser = (user: { id: number }) => go(`/users/${user.id}`);
  return (
    <div>
      <Link to="/settings">Settings</Link>
      <a href="/about">About</a>
      <a href="//cdn.example.com/x">CDN</a>
    </div>
  );
}
"""

REACT_JSX_ROUTES = """\
import { Routes, Route } from 'react-router-dom';

export function AppRoutes() {
  return (
    <Routes>
      <Route path="/shop" element={<Shop />}>
        <Route path="cart" element={<Cart />} />
      </Route>
      <Route path="*" element={<NotFound />} />
    </Routes>
  );
}
"""


class TestReactRoutes(unittest.TestCase):
    def test_data_router_and_jsx_routes(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, "src/main.tsx", REACT_MAIN)
            write_file(root, "src/routes.tsx", REACT_JSX_ROUTES)
            warnings = []
            ctx = resolve_react_routes(load_project(root, warnings), warnings)
            routes = {route.full_path: route for route in ctx.collection.routes()}
            self.assertEqual(routes["/"].component, "Layout")
            self.assertEqual(routes["/users/:userId"].component, "UserProfile")
            self.assertEqual(routes["/settings"].component, "SettingsPage")
            self.assertEqual(routes["/old"].redirect_to, "/users/1")
            self.assertEqual(routes["/about"].component, "About")
            self.assertEqual(routes["/shop"].component, "Shop")
            self.assertEqual(routes["/shop/cart"].component, "Cart")
            self.assertEqual(routes["/*"].component, "NotFound")

    def test_react_flows(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, "src/main.tsx", REACT_MAIN)
            write_file(root, "src/pages/Home.tsx", REACT_HOME)
            project = load_project(root)
            flows = extract_file_flows(project, "src/pages/Home.tsx")
            self.assertEqual(
                [(flow.source, flow.to, flow.type) for flow in flows],
                [
                    ("Home", "/users/:id", "dynamic"),
                    ("Home", "/settings", "static"),
                    ("Home", "/about", "static"),
                ],
            )
            # A <Navigate> used as a route element is a route redirect, not a flow.
            self.assertEqual(extract_file_flows(project, "src/main.tsx"), [])

    def test_children_by_reference(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/main.tsx",
                "import { createBrowserRouter } from 'react-router-dom';\n"
                "import { adminRoutes } from './admin/routes';\n"
                "const inboxChildren = [\n"
                "  { path: ':messageId', element: <Message /> },\n"
                "];\n"
                "export const router = createBrowserRouter([\n"
                "  { path: '/inbox', element: <Inbox />, children: inboxChildren },\n"
                "  { path: '/admin', element: <Admin />, children: adminRoutes },\n"
                "]);\n",
            )
            write_file(root, "src/admin/routes.tsx", "export const adminRoutes = [{ path: 'users', element: <AdminUsers /> }];\n")
            warnings = []
            ctx = resolve_react_routes(load_project(root, warnings), warnings)
            self.assertEqual(
                [(route.full_path, route.component) for route in ctx.collection.routes()],
                [
                    ("/inbox", "Inbox"),
                    ("/inbox/:messageId", "Message"),
                    ("/admin", "Admin"),
                    ("/admin/users", "AdminUsers"),
                ],
            )
            self.assertEqual(warnings, [])

    def test_nextjs_pages_router(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, "pages/_app.js", "export default function App({ Component }) { return <Component />; }\n")
            write_file(root, "pages/index.js", "export default function Home() { return <main />; }\n")
            write_file(root, "pages/about.js", "const About = () => <main />;\nexport default About;\n")
            write_file(root, "pages/users/[id].js", "export default function Page() { return null; }\n")
            write_file(root, "pages/docs/[...slug].js", "export default function Docs() { return null; }\n")
            write_file(root, "pages/api/hello.js", "export default function handler(req, res) {}\n")
            warnings = []
            ctx = resolve_react_routes(load_project(root, warnings), warnings, library="next")
            routes = {route.full_path: route for route in ctx.collection.routes()}
            self.assertEqual(sorted(routes), ["/", "/about", "/docs/*", "/users/:id"])
            self.assertEqual(routes["/"].component, "Home")
            self.assertTrue(routes["/"].is_root)
            self.assertEqual(routes["/about"].component, "About")
            self.assertEqual(routes["/about"].file, "pages/about.js")
            self.assertEqual(routes["/users/:id"].component, "UsersIdPage")
            self.assertEqual(routes["/docs/*"].component, "Docs")

            # Without the library the same layout is not a route table.
            ctx = resolve_react_routes(load_project(root), [])
            self.assertEqual(len(ctx.collection), 0)

    def test_nextjs_app_router(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, "src/app/layout.tsx", "export default function RootLayout({ children }) { return children; }\n")
            write_file(root, "src/app/page.tsx", "export default function Page() { return <main />; }\n")
            write_file(root, "src/app/(marketing)/pricing/page.tsx", "export default function PricingPage() { return null; }\n")
            write_file(root, "src/app/blog/[slug]/page.tsx", "export default function Page() { return null; }\n")
            write_file(root, "src/app/api/users/route.ts", "export async function GET() { return null; }\n")
            write_file(root, "src/app/_components/Nav.tsx", "export default function Nav() { return null; }\n")
            ctx = resolve_react_routes(load_project(root), [], library="next")
            self.assertEqual(
                sorted((route.full_path, route.component) for route in ctx.collection.routes()),
                [("/", "IndexPage"), ("/blog/:slug", "BlogSlugPage"), ("/pricing", "PricingPage")],
            )

    def test_file_route_paths(self):
        self.assertEqual(nextjs_pages_path("users/[id].tsx"), "/users/:id")
        self.assertEqual(nextjs_pages_path("index.tsx"), "/")
        self.assertEqual(nextjs_pages_path("blog/index.js"), "/blog")
        self.assertEqual(nextjs_pages_path("blog/[[...slug]].js"), "/blog/*")
        self.assertIsNone(nextjs_pages_path("_document.tsx"))
        self.assertIsNone(nextjs_pages_path("api/users.ts"))
        self.assertIsNone(nextjs_pages_path("types.d.ts"))
        self.assertIsNone(nextjs_pages_path("styles.css"))

        self.assertEqual(nextjs_app_path("(shop)/cart/page.tsx"), "/cart")
        self.assertEqual(nextjs_app_path("@modal/login/page.tsx"), "/login")
        self.assertIsNone(nextjs_app_path("layout.tsx"))
        self.assertIsNone(nextjs_app_path("api/users/route.ts"))

        self.assertEqual(gatsby_path("index.js"), "/")
        self.assertEqual(gatsby_path("blog/{MarkdownRemark.slug}.js"), "/blog/:slug")
        self.assertEqual(gatsby_path("app/[...].js"), "/app/*")

        self.assertEqual(remix_path("_index.tsx"), "/")
        self.assertEqual(remix_path("users.$id.tsx"), "/users/:id")
        self.assertEqual(remix_path("users.$id_.edit.tsx"), "/users/:id/edit")
        self.assertEqual(remix_path("_auth.login.tsx"), "/login")
        self.assertEqual(remix_path("files.$.tsx"), "/files/*")
        self.assertEqual(remix_path("dashboard/route.tsx"), "/dashboard")

        self.assertEqual(
            file_route_entries(["pages/x.js", "src/pages/index.js", "src/App.tsx"], "next"),
            [("pages/x.js", "/x"), ("src/pages/index.js", "/")],
        )
        self.assertEqual(file_route_entries(["app/routes/_index.tsx"], "remix"), [("app/routes/_index.tsx", "/")])
        self.assertEqual(file_route_entries(["pages/x.js"], "react-router"), [])
        self.assertEqual(route_component_name("/"), "IndexPage")
        self.assertEqual(route_component_name("/docs/*"), "DocsAllPage")

    def test_tanstack_routes(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/router.tsx",
                "import { createRootRoute, createRoute, createRouter, lazyRouteComponent } from '@tanstack/react-router';\n"
                "const rootRoute = createRootRoute({ component: Root });\n"
                "const indexRoute = createRoute({ getParentRoute: () => rootRoute, path: '/', component: Home });\n"
                "const postsRoute = createRoute({ getParentRoute: () => rootRoute, path: 'posts', component: Posts });\n"
                "const postRoute = createRoute({\n"
                "  getParentRoute: () => postsRoute,\n"
                "  path: '$postId',\n"
                "  component: lazyRouteComponent(() => import('./pages/post-detail')),\n"
                "});\n"
                "export const router = createRouter({ routeTree: rootRoute.addChildren([indexRoute, postsRoute.addChildren([postRoute])]) });\n",
            )
            write_file(
                root,
                "src/routes/users.$id.tsx",
                "export const Route = createFileRoute('/users/$id')({ component: UserPage });\n",
            )
            warnings = []
            ctx = resolve_react_routes(load_project(root, warnings), warnings, library="tanstack-router")
            self.assertEqual(
                sorted((route.full_path, route.component) for route in ctx.collection.routes()),
                [
                    ("/", "Home"),
                    ("/posts", "Posts"),
                    ("/posts/:postId", "PostDetail"),
                    ("/users/:id", "UserPage"),
                ],
            )
            self.assertTrue(ctx.collection.get("/").is_root)
            self.assertEqual(warnings, [])
        self.assertEqual(tanstack_path("/_layout/settings"), "settings")
        self.assertEqual(tanstack_path("/files/$"), "files/*")

    def test_reach_router(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/App.js",
                "import { Router, Redirect } from '@reach/router';\n"
                "export const App = () => (\n"
                "  <Router>\n"
                "    <Home path=\"/\" />\n"
                "    <Dashboard path=\"dashboard\">\n"
                "      <Invoice path=\"invoices/:invoiceId\" />\n"
                "      <Settings path=\"/dashboard/settings\" />\n"
                "    </Dashboard>\n"
                "    <Redirect from=\"old\" to=\"/dashboard\" />\n"
                "    <NotFound default />\n"
                "  </Router>\n"
                ");\n",
            )
            ctx = resolve_react_routes(load_project(root), [], library="reach-router")
            routes = {route.full_path: route for route in ctx.collection.routes()}
            self.assertEqual(
                list(routes),
                ["/", "/dashboard", "/dashboard/invoices/:invoiceId", "/dashboard/settings", "/old", "/*"],
            )
            self.assertEqual(routes["/"].component, "Home")
            self.assertTrue(routes["/"].is_root)
            self.assertEqual(routes["/dashboard/invoices/:invoiceId"].component, "Invoice")
            self.assertEqual(routes["/old"].redirect_to, "/dashboard")
            self.assertEqual(routes["/*"].component, "NotFound")

            ctx = resolve_react_routes(load_project(root), [])
            self.assertEqual(len(ctx.collection), 0)


class TestFlows(unittest.TestCase):
    def test_imperative_and_template_flows(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_angular_app(root)
            project = load_project(root)
            flows = extract_file_flows(project, "src/app/home/home.component.ts")
            self.assertEqual(
                [(flow.source, flow.to, flow.type, flow.label) for flow in flows],
                [
                    ("HomeComponent", "/about/:id", "dynamic", "item.id"),
                    ("HomeComponent", "/home", "dynamic", "back to the landing page"),
                    ("HomeComponent", "/about/123", "dynamic", None),
                    ("HomeComponent", "/about/42", "static", None),
                    ("HomeComponent", "/a/b", "static", None),
                    ("HomeComponent", "feature", "static", None),
                ],
            )
            self.assertEqual(flows[-1].file, "src/app/home/home.component.html")

    def test_guard_flows_and_else_branch_label(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/auth.guard.ts",
                "export class AuthGuard implements CanActivate {\n"
                "  canActivate() {\n"
                "    if (this.auth.loggedIn) {\n"
                "      return true;\n"
                "    } else {\n"
                "      return this.router.createUrlTree(['/login']);\n"
                "    }\n"
                "  }\n"
                "}\n",
            )
            write_file(
                root,
                "src/app/shared/nav-helper.ts",
                "export function leave(router) {\n"
                "  router.createUrlTree(['/ignored']);\n"
                "  router.navigate(['list', '', 'details/']);\n"
                "}\n",
            )
            project = load_project(root)
            flows = extract_flows(project, workers=2)
            self.assertEqual(
                [(flow.source, flow.to, flow.type, flow.label) for flow in flows],
                [
                    ("AuthGuard", "/login", "guard", "!(this.auth.loggedIn)"),
                    ("leave", "list/details", "dynamic", None),
                ],
            )

    def test_markup_targets(self):
        text = (
            '<a routerLink="/users/">Users</a>\n'
            "<a [routerLink]=\"['/users', user.id, 'edit']\">Edit</a>\n"
            "<a [routerLink]=\"'/static'\">Static</a>\n"
            '<a [routerLink]="link">Dynamic</a>\n'
            '<a routerLinkActive="active" href="/plain">Plain</a>\n'
            '<a href="//external.example.com">Ext</a>\n'
        )
        self.assertEqual(
            markup_targets(text),
            ["/users", "/users/:id/edit", "/static", "/plain"],
        )
        self.assertEqual(bound_target("['child', item.slug]"), "child/:itemslug")
        self.assertIsNone(bound_target("someLink"))


class TestMenus(unittest.TestCase):
    def test_extract_menus(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                "src/app/nav/menu.config.ts",
                "export const MENU = [\n"
                "  { title: 'Home', path: '/' },\n"
                "  { label: 'Admin', href: '/admin', roles: ['admin'], children: [\n"
                "    { title: 'Users', path: '/admin/users' },\n"
                "  ]},\n"
                "];\n",
            )
            write_file(root, "src/app/other.ts", "export const X = [{ title: 'x', path: '/x' }];\n")
            menus = extract_menus(load_project(root))
            self.assertEqual([(menu.title, menu.path) for menu in menus], [("Home", "/"), ("Admin", "/admin")])
            self.assertEqual(menus[1].roles, ["admin"])
            self.assertEqual([(child.title, child.path) for child in menus[1].children], [("Users", "/admin/users")])


class TestProject(unittest.TestCase):
    def test_empty_project(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            result = analyze_project(Path(temp_dir))
            self.assertEqual(result.routes, [])
            self.assertEqual(result.flows, [])
            self.assertEqual(result.menus, [])

    def test_analyze_angular_project(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_angular_app(root)
            write_file(root, "node_modules/lib/app.config.ts", "provideRouter([{ path: 'bad', component: Bad }]);\n")
            result = analyze_project(root, AnalyzeOptions(framework="angular"))
            self.assertEqual(result.framework, "angular")
            paths = [route.full_path for route in result.routes]
            self.assertNotIn("/bad", paths)
            self.assertIn("/about/:id", paths)
            self.assertTrue(any(flow.to == "/about/123" for flow in result.flows))

    def test_repo_config_and_framework_detection(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(
                root,
                ".routemap.json",
                '{\n  // local overrides\n  "framework": "react",\n  "exclude_globs": ["legacy/*"]\n}\n',
            )
            write_file(root, "package.json", '{"dependencies": {"@angular/core": "^17.0.0"}}')
            warnings = []
            config, source = load_repo_config(root, warnings)
            self.assertEqual(source, ".routemap.json")
            self.assertEqual(config["framework"], "react")
            self.assertEqual(config["exclude_globs"], ["legacy/*"])
            self.assertEqual(warnings, [])
            self.assertEqual(detect_framework(root, []), "angular")

        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, ".routemap.json", "[1, 2]")
            warnings = []
            config, _ = load_repo_config(root, warnings)
            self.assertEqual(config, {})
            self.assertTrue(warnings[0].startswith("Invalid .routemap.json"))
            self.assertEqual(detect_framework(root, ["src/App.tsx"]), "react")

    def test_router_library_detection(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            self.assertIsNone(detect_router_library(root))
            write_file(
                root,
                "package.json",
                '{"dependencies": {"react": "^18.0.0", "react-router-dom": "^6.0.0", "next": "^14.0.0"}}',
            )
            self.assertEqual(detect_router_library(root), "next")
            write_file(root, "package.json", '{"devDependencies": {"@reach/router": "^1.3.0"}}')
            self.assertEqual(detect_router_library(root), "reach-router")
            self.assertEqual(detect_framework(root, []), "react")

            write_file(root, ".routemap.json", '{"router_library": "remix"}')
            warnings = []
            config, _ = load_repo_config(root, warnings)
            self.assertEqual(config["router_library"], "remix")
            write_file(root, ".routemap.json", '{"router_library": "vue-router"}')
            config, _ = load_repo_config(root, warnings)
            self.assertNotIn("router_library", config)
            self.assertTrue(warnings[0].startswith("Invalid .routemap.json: unknown router_library"))

    def test_analyze_nextjs_project(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            write_file(root, "package.json", '{"dependencies": {"next": "^14.0.0", "react": "^18.0.0"}}')
            write_file(root, "pages/index.tsx", "export default function Home() { return <Link href=\"/about\">About</Link>; }\n")
            write_file(root, "pages/about.tsx", "export default function About() { return null; }\n")
            result = analyze_project(root, AnalyzeOptions(menus=False))
            self.assertEqual(result.framework, "react")
            self.assertEqual(result.meta["router_library"], "next")
            self.assertEqual(
                [(route.full_path, route.component) for route in result.routes],
                [("/about", "About"), ("/", "Home")],
            )


if __name__ == "__main__":
    unittest.main()
