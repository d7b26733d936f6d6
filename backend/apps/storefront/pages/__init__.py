"""Page initializers. Each is ``async def initialize(ctx: PageContext)``."""
