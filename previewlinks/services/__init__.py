from previewlinks.services.slug_allocator import SlugAllocator
from previewlinks.services.registry import RegistryUpsertCoordinator
from previewlinks.services.resolver import Resolver
from previewlinks.services.renderer import render_redirect_page
from previewlinks.services.screenshot import ScreenshotPipeline, RenderServiceScreenshotPipeline


__all__ = [
    'SlugAllocator',
    'RegistryUpsertCoordinator',
    'Resolver',
    'render_redirect_page',
    'ScreenshotPipeline',
    'RenderServiceScreenshotPipeline',
]
