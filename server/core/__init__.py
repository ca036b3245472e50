"""Core platform components - the 'Console' in Console and Cartridge architecture."""

from .clock import TickClock, TimerClock, ManualClock
from .render_surface import RenderSurface, SocketIORenderSurface, BufferRenderSurface, OutputLine

__all__ = [
    'TickClock', 'TimerClock', 'ManualClock',
    'RenderSurface', 'SocketIORenderSurface', 'BufferRenderSurface', 'OutputLine',
]
