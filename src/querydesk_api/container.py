from querydesk import QueryDispatcher

from querydesk_api.services import WarehouseService, ClusterService, HealthService


class Container:
    def __init__(self, dispatcher: QueryDispatcher = None):
        self.dispatcher = dispatcher or QueryDispatcher()
        self.warehouse = WarehouseService(self.dispatcher)
        self.cluster = ClusterService(self.dispatcher)
        self.health = HealthService()
