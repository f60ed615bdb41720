from inventory_api.data.core.store import Store


class StoreService:

    @staticmethod
    def get_all():
        return Store.query.order_by(Store.name).all()
