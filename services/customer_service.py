from typing import List, Optional
from loguru import logger
from database.store import EntityStore
from models.customer import Customer
from utils.validators import normalize_email

async def get_or_create_customer(
    store: EntityStore,
    name: str,
    email: str,
    phone: Optional[str] = None
) -> Customer:
    """
    Находит клиента по email или создает нового
    Повторный вызов с тем же email не создает дубликатов
    """
    email = normalize_email(email)
    customer = await store.get_customer_by_email(email)

    if not customer:
        customer = await store.create_customer(name=name.strip(), email=email, phone=phone or None)
        logger.info(f"Создан клиент #{customer.id} ({email})")
    elif phone and not customer.phone:
        customer = await store.update_customer(customer.id, phone=phone)

    return customer

async def get_customer_by_email(store: EntityStore, email: str) -> Optional[Customer]:
    return await store.get_customer_by_email(normalize_email(email))

async def get_customer_by_id(store: EntityStore, customer_id: int) -> Optional[Customer]:
    return await store.get_customer_by_id(customer_id)

async def get_all_customers(store: EntityStore) -> List[Customer]:
    return await store.get_customers()
