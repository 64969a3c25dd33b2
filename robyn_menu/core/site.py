import logging
import os
from pathlib import Path
from types import ModuleType
from typing import Type, Optional, Dict, List, Iterable, Union, Any

from robyn import Robyn, Request, Response, jsonify
from robyn.templating import JinjaTemplate

from .discovery import MenuDiscovery, MenuRegistry, ModuleDiscovery, ManifestDiscovery, ChainDiscovery
from .menu import MenuNode, MenuTreeBuilder, find_trail
from .page import MenuPage
from ..renderers.base import HtmlMenuRenderer

logger = logging.getLogger(__name__)

MENU_LIFETIMES = ("process", "request")


class MenuSite:
    """菜单站点主类"""
    def __init__(
        self,
        app: Robyn,
        discovery: Optional[MenuDiscovery] = None,
        modules: Optional[Iterable[Union[str, ModuleType]]] = None,
        manifest: Optional[str] = None,
        name: str = "menu",
        strict: bool = False,
        menu_lifetime: str = "process",
        site_title: str = "Site",
    ):
        """
        初始化菜单站点

        :param app: Robyn应用实例
        :param discovery: 菜单声明来源, 为None时使用站点自己的注册表
        :param modules: 需要扫描页面类的模块, 扫描到的页面会自动挂载路由
        :param manifest: JSON 菜单清单文件路径, 清单中的菜单只参与菜单树, 不挂载路由
        :param name: 菜单接口路由前缀
        :param strict: 重复标识或循环引用时是否抛出异常
        :param menu_lifetime: "process" 进程内只构建一次, "request" 每次请求重新构建
        """
        if menu_lifetime not in MENU_LIFETIMES:
            raise ValueError(f"menu_lifetime 必须是 {MENU_LIFETIMES} 之一, 收到 {menu_lifetime!r}")

        self.app = app
        self.name = name
        self.site_title = site_title
        self.menu_lifetime = menu_lifetime
        self.registry = MenuRegistry()
        self.module_discovery = ModuleDiscovery(modules) if modules else None

        # 传入自定义 discovery 时, register_page 注册的页面不会进入菜单
        self.uses_registry = discovery is None
        if discovery is None:
            sources: List[MenuDiscovery] = [self.registry]
            if self.module_discovery:
                sources.append(self.module_discovery)
            if manifest:
                sources.append(ManifestDiscovery(manifest))
            discovery = sources[0] if len(sources) == 1 else ChainDiscovery(*sources)
        self.builder = MenuTreeBuilder(discovery, strict=strict)

        self._routes: Dict[str, Type[MenuPage]] = {}

        self._setup_templates()
        self._setup_routes()

        if self.module_discovery:
            for page_cls in self.module_discovery.pages():
                self._add_page_route(page_cls)

    def _setup_templates(self):
        """设置模板目录"""
        current_dir = Path(__file__).parent.parent
        template_dir = os.path.join(current_dir, 'templates')
        self.template_dir = template_dir
        self.html_renderer = HtmlMenuRenderer()
        self.jinja_template = JinjaTemplate(template_dir)
        self.jinja_template.env.globals.update({
            'render_menu': self._render_menu
        })

    def _render_menu(self, nodes: List[MenuNode], active_route: Optional[str] = None) -> str:
        return self.html_renderer.render(nodes, {"active_route": active_route})

    def _setup_routes(self):
        """设置路由"""
        @self.app.get(f"/{self.name}/menu.json")
        async def menu_json(request: Request):
            return jsonify({"menus": [node.to_dict() for node in self.get_menus()]})

    def get_menus(self) -> List[MenuNode]:
        """获取菜单树"""
        if self.menu_lifetime == "request":
            return self.builder.build()
        # 首次构建后不再接受注册
        self.registry.freeze()
        return self.builder.menu_items

    def register_page(self, page_cls: Type[MenuPage]) -> Type[MenuPage]:
        """注册页面并挂载路由, 也可以当作类装饰器使用"""
        if not self.uses_registry:
            logger.warning(
                "Page %s registered on a site with a custom discovery: it gets a route "
                "but will only appear in the menu if that discovery declares it",
                page_cls.__name__
            )
        self.registry.register_page(page_cls)
        self._add_page_route(page_cls)
        return page_cls

    def _add_page_route(self, page_cls: Type[MenuPage]):
        route = page_cls.menu_route
        if route in self._routes:
            logger.warning(
                "Route %s already served by %s, skipping %s",
                route, self._routes[route].__name__, page_cls.__name__
            )
            return
        self._routes[route] = page_cls
        logger.info("Registering page %s at %s", page_cls.__name__, route)

        @self.app.get(route)
        async def page_view(request: Request):
            try:
                return await self.render_page(page_cls, request)
            except Exception:
                logger.exception("Error rendering page %s", page_cls.__name__)
                return Response(
                    status_code=500,
                    description=f"页面渲染失败: {page_cls.__name__}",
                    headers={"Content-Type": "text/plain; charset=utf-8"},
                )

    async def page_context(self, page_cls: Type[MenuPage], request: Optional[Request]) -> Dict[str, Any]:
        """构建页面模板上下文"""
        page = page_cls()
        menus = self.get_menus()
        context = {
            "site_title": self.site_title,
            "menus": menus,
            "active_route": page_cls.menu_route,
            "trail": find_trail(menus, page_cls.menu_route),
            "page": page,
            "title": page.title or page_cls.__dict__.get("menu_label") or page_cls.__name__,
        }
        context.update(await page.get_context(request))
        return context

    async def render_page(self, page_cls: Type[MenuPage], request: Optional[Request] = None):
        context = await self.page_context(page_cls, request)
        return self.jinja_template.render_template(page_cls.template_name, **context)

    @property
    def routes(self) -> Dict[str, Type[MenuPage]]:
        """已挂载的页面路由"""
        return dict(self._routes)
