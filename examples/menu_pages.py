from robyn_menu.core.page import MenuPage


class IndexPage(MenuPage):
    """首页"""
    menu_route = "/"
    menu_label = "Home"
    menu_icon = "bi bi-house"


class PrivacyPage(MenuPage):
    """隐私政策"""
    menu_route = "/privacy"
    menu_label = "Privacy"
    menu_icon = "bi bi-shield-lock"

    async def get_context(self, request):
        return {"policy_version": "2024-01"}


# 多级菜单演示
class Impressum(MenuPage):
    menu_route = "/menu-pages/impressum"
    menu_label = "Impressum"


class SubImpressum1(MenuPage):
    menu_route = "/menu-pages/sub-impressum-1"
    menu_label = "Subimpressum 1"
    menu_parent = Impressum


class SubImpressum2(MenuPage):
    menu_route = "/menu-pages/sub-impressum-2"
    menu_label = "Subimpressum 2"
    menu_parent = Impressum


class SubPrivacy1(MenuPage):
    menu_route = "/menu-pages/sub-privacy-1"
    menu_label = "SubPrivacy 1"
    menu_parent = PrivacyPage


class SubSubPrivacy1(MenuPage):
    menu_route = "/menu-pages/sub-sub-privacy-1"
    menu_label = "SubSubPrivacy 1"
    menu_parent = SubPrivacy1


class Team(MenuPage):
    menu_route = "/menu-pages/team"
    menu_label = "Team"
    menu_icon = "bi bi-people"


class SubTeam1(MenuPage):
    menu_route = "/menu-pages/sub-team-1"
    menu_label = "SubTeam 1"
    menu_parent = Team


class SubTeam2(MenuPage):
    menu_route = "/menu-pages/sub-team-2"
    menu_label = "SubTeam 2"
    menu_parent = Team


class SubSubTeam1(MenuPage):
    menu_route = "/menu-pages/sub-sub-team-1"
    menu_label = "SubSubTeam 1"
    menu_parent = SubTeam1


class SubSubSubTeam1(MenuPage):
    menu_route = "/menu-pages/sub-sub-sub-team-1"
    menu_label = "SubSubSubTeam 1"
    menu_parent = SubSubTeam1


class SubSubTeam2(MenuPage):
    menu_route = "/menu-pages/sub-sub-team-2"
    menu_label = "SubSubTeam 2"
    menu_parent = SubTeam2
