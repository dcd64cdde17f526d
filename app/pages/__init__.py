from app.pages.renderer import PageRenderer, flash_message, status_color

__all__ = ["PageRenderer", "flash_message", "status_color"]
