from api.socketio.dashboard.broadcaster import register_dashboard_broadcaster
from api.socketio.dashboard.on_connect import register_on_connect
from api.socketio.dashboard.interactions import register_interactions
from api.socketio.tasks.broadcaster import register_tasks


def register_socketio(sio, services, controller):
    register_dashboard_broadcaster(sio, services)
    register_on_connect(sio, services)
    register_interactions(sio, services, controller)

    register_tasks(sio)
