from dashboard.interactions import Rect
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOCKETIO)


def register_interactions(sio, services, controller):
    """
    Client-to-server events: viewport reports and page interactions.
    Invalid payloads are answered with an "error" event to the sender.
    """

    async def reply_error(sid: str, event: str, message: str):
        log.warn(f"Rejected '{event}' from {sid}: {message}")
        await sio.emit("error", {"event": event, "message": message}, room=sid)

    @sio.on("visibility:report")
    async def visibility_report(sid, data):
        try:
            element_id = data["id"]
            ratio = float(data["ratio"])
            fired = await services.visibility.report(element_id, ratio)
        except (KeyError, TypeError, ValueError) as e:
            await reply_error(sid, "visibility:report", str(e))
            return
        return {"id": element_id, "fired": fired}

    @sio.on("map:select")
    async def map_select(sid, data):
        try:
            await controller.select_map_layer(data["layer"])
        except (KeyError, TypeError, ValueError) as e:
            await reply_error(sid, "map:select", str(e))

    @sio.on("button:click")
    async def button_click(sid, data):
        try:
            rect = Rect(
                float(data["left"]), float(data["top"]),
                float(data["width"]), float(data["height"])
            )
            await controller.click_button(rect, float(data["x"]), float(data["y"]))
        except (KeyError, TypeError, ValueError) as e:
            await reply_error(sid, "button:click", str(e))

    @sio.on("page:scroll")
    async def page_scroll(sid, data):
        try:
            await controller.scroll_page(float(data["y"]))
        except (KeyError, TypeError, ValueError) as e:
            await reply_error(sid, "page:scroll", str(e))

    @sio.on("card:hover")
    async def card_hover(sid, data):
        try:
            hovered = data["hovered"]
            if not isinstance(hovered, bool):
                raise TypeError(f"hovered must be a boolean, got {hovered!r}")
            await controller.hover_card(data["id"], hovered)
        except (KeyError, TypeError, ValueError) as e:
            await reply_error(sid, "card:hover", str(e))
