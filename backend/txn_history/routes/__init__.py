from txn_history.routes.customer import router as customer_router

__all__ = ["customer_router"]
