from __future__ import annotations
from typing import List, Tuple

from .models import Channel
from .pagination import FetchResult, fetch_page

CHANNELS_PATH = '/v3/channels'


class ChannelsMixin:

    def get_channels(self, page: int = 1) -> Tuple[List[Channel], bool]:
        p = fetch_page(self, CHANNELS_PATH, Channel, page)
        return p.items, p.has_more

    def get_all_channels(self) -> FetchResult:
        return self.fetch_all(CHANNELS_PATH, None, Channel)
