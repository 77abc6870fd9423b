"""
Notices.

Two kinds of user feedback:
    - page notices (`div.notice.notice-{type}`) placed in the notices anchor,
      used for load failures and post-close success messages
    - inline form notices (`div.flyout-form-notice.{type}`) placed at the top
      of a panel body; at most one per panel

Both are removed automatically after a duration (0 keeps them).

Exports:
    NoticeManager: Creates and expires notices in a ClientDocument
"""

from typing import Optional
import asyncio
import html as html_module

from bs4 import Tag

from config.client_config import ClientConfig
from flyout_client.document import ClientDocument

PAGE_NOTICE_TYPES = ("success", "error", "warning", "info")


class NoticeManager:
    """Shows page-level and inline notices."""

    def __init__(self, document: ClientDocument, config: ClientConfig):
        self.document = document
        self.config = config

    def _schedule_removal(self, tag: Tag, delay: float) -> None:
        if delay <= 0:
            return
        asyncio.get_running_loop().call_later(delay, self.document.remove, tag)

    def page_notice(self, message: str, notice_type: str = "success", duration: Optional[float] = None) -> Tag:
        """
        Show a dismissible page notice.

        Success notices expire after success_notice_duration unless a
        duration is given; other types stay until dismissed.
        """
        if notice_type not in PAGE_NOTICE_TYPES:
            notice_type = "info"
        anchor = self.document.select_one(self.config.notice_anchor_selector) or self.document.body
        notice = self.document.prepend_markup(
            f'<div class="notice notice-{notice_type} is-dismissible" role="alert">'
            f'<p>{html_module.escape(str(message))}</p>'
            f'</div>',
            anchor,
        )
        if duration is None:
            duration = self.config.success_notice_duration if notice_type == "success" else 0
        self._schedule_removal(notice, duration)
        return notice

    def form_notice(self, panel: Tag, message: str, notice_type: str = "error") -> Optional[Tag]:
        """
        Show the inline notice of a panel, replacing any previous one.
        """
        for existing in self.document.select(".flyout-form-notice", panel):
            self.document.remove(existing)
        container = self.document.select_one(".flyout-body", panel) or panel
        notice = self.document.prepend_markup(
            f'<div class="flyout-form-notice {notice_type}" role="alert">'
            f'<p>{html_module.escape(str(message))}</p>'
            f'</div>',
            container,
        )
        self._schedule_removal(notice, self.config.notice_duration)
        return notice
