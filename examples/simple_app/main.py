import logging

from robyn import Robyn
from robyn_menu.core import MenuSite, MenuPage

logging.basicConfig(level=logging.INFO)

app = Robyn(__file__)

# 扫描 examples.menu_pages 中声明的页面, 自动挂载路由
menu_site = MenuSite(
    app,
    modules=["examples.menu_pages"],
    manifest="examples/menu.json",
    site_title="Dynamic Menu",
)


# 也可以显式注册页面
@menu_site.register_page
class ContactPage(MenuPage):
    menu_route = "/contact"
    menu_label = "Contact"
    menu_icon = "bi bi-envelope"


if __name__ == "__main__":
    app.start(host="127.0.0.1", port=8100)
