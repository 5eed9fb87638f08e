from .consumers import AutoPublishBanner, NotificationBell
from .stream import NotificationStream, RequestsEventSource, StreamState, ThreadingScheduler
