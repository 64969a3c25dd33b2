from .menu import MenuDeclaration, MenuNode, MenuTreeBuilder, find_trail, identity_name
from .page import MenuPage
from .discovery import MenuDiscovery, MenuRegistry, ModuleDiscovery, ManifestDiscovery, ChainDiscovery
from .errors import MenuError, DuplicateIdentity, CyclicReference, RegistryFrozen, ManifestError
from .site import MenuSite

__all__ = [
    'MenuDeclaration',
    'MenuNode',
    'MenuTreeBuilder',
    'MenuPage',
    'MenuDiscovery',
    'MenuRegistry',
    'ModuleDiscovery',
    'ManifestDiscovery',
    'ChainDiscovery',
    'MenuSite',
    'MenuError',
    'DuplicateIdentity',
    'CyclicReference',
    'RegistryFrozen',
    'ManifestError',
    'find_trail',
    'identity_name',
]
