from typing import Type, Optional, Dict, Any

from .menu import MenuDeclaration


class MenuPage:
    """页面基类

    menu_route: 页面路由, 不设置则该页面不出现在菜单中

    menu_label: 菜单显示名称, 默认使用类名

    menu_parent: 父页面类, None 表示顶级菜单

    menu_icon: bootstrap icon class
    """
    # 菜单配置
    menu_route: str = ""
    menu_label: str = ""
    menu_parent: Optional[Type["MenuPage"]] = None
    menu_icon: str = ""

    # 页面显示配置
    title: str = ""
    template_name: str = "menu/page.html"

    @classmethod
    def declares_menu(cls) -> bool:
        """只认本类自己声明的 menu_route, 继承来的不算"""
        return bool(cls.__dict__.get("menu_route"))

    @classmethod
    def declaration(cls) -> Optional[MenuDeclaration]:
        """生成菜单声明"""
        if not cls.declares_menu():
            return None
        # 菜单属性不从父类继承, 子类需要自己声明
        options = cls.__dict__
        return MenuDeclaration(
            route=options["menu_route"],
            label=options.get("menu_label") or cls.__name__,
            self_id=cls,
            parent_id=options.get("menu_parent"),
            icon=options.get("menu_icon", ""),
        )

    async def get_context(self, request) -> Dict[str, Any]:
        """页面模板的额外上下文"""
        return {}
