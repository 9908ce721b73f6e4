"""
API бронирований для слоя представления
Принимает и возвращает словари; ошибки отдаются как {"error": ..., "code": ...}
"""
from datetime import datetime
from typing import Any, Dict, Optional
from loguru import logger
from database.store import EntityStore
from models.booking import Booking
from models.customer import Customer
from models.table import Table
from services import booking_service
from services.customer_service import get_all_customers
from utils.errors import BookingError, StorageError, ValidationError
from utils.validators import parse_booking_date

def _error(error: BookingError) -> Dict[str, Any]:
    return {"error": error.message, "code": error.code}

def _internal_error() -> Dict[str, Any]:
    return {"error": "Внутренняя ошибка сервера", "code": "internal_error"}

def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None

def serialize_customer(customer: Customer) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "createdAt": _iso(customer.created_at),
        "updatedAt": _iso(customer.updated_at),
    }

def serialize_table(table: Table) -> Dict[str, Any]:
    return {
        "id": table.id,
        "number": table.number,
        "capacity": table.capacity,
        "location": table.location,
        "description": table.description,
        "isActive": table.is_active,
    }

def serialize_booking(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "customerId": booking.customer_id,
        "tableId": booking.table_id,
        "date": _iso(booking.date),
        "duration": booking.duration,
        "partySize": booking.party_size,
        "status": booking.status.value,
        "specialRequests": booking.special_requests,
        "createdAt": _iso(booking.created_at),
        "updatedAt": _iso(booking.updated_at),
        "customer": serialize_customer(booking.customer) if booking.customer else None,
        "table": serialize_table(booking.table) if booking.table else None,
    }

async def _guarded(operation: str, coro) -> Dict[str, Any]:
    try:
        return await coro
    except StorageError as e:
        logger.error(f"Ошибка хранилища ({operation}): {e.message}")
        return _internal_error()
    except BookingError as e:
        logger.info(f"{operation}: {e.code} - {e.message}")
        return _error(e)
    except Exception as e:
        logger.exception(f"Непредвиденная ошибка ({operation}): {e}")
        return _internal_error()

async def _create_booking(store: EntityStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    booking = await booking_service.create_booking(
        store,
        customer_info={
            "name": payload.get("customerName"),
            "email": payload.get("customerEmail"),
            "phone": payload.get("customerPhone"),
        },
        table_id=payload.get("tableId"),
        date=payload.get("date"),
        party_size=payload.get("partySize"),
        special_requests=payload.get("specialRequests"),
        duration=payload.get("duration"),
    )
    return {
        "message": "Бронь успешно создана",
        "bookingId": booking.id,
        "booking": {
            "id": booking.id,
            "date": _iso(booking.date),
            "tableNumber": booking.table.number,
            "customerName": booking.customer.name,
            "status": booking.status.value,
        },
    }

async def create_booking_request(store: EntityStore, payload: Dict[str, Any]) -> Dict[str, Any]:
    return await _guarded("Создание брони", _create_booking(store, payload))

async def _get_booking(store: EntityStore, booking_id: int) -> Dict[str, Any]:
    booking = await booking_service.get_booking_by_id(store, booking_id)
    if not booking:
        return {"error": "Бронь не найдена", "code": "not_found"}
    return {"booking": serialize_booking(booking)}

async def get_booking_request(store: EntityStore, booking_id: int) -> Dict[str, Any]:
    return await _guarded("Получение брони", _get_booking(store, booking_id))

async def _update_booking(store: EntityStore, booking_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    special_requests = None
    if "specialRequests" in payload:
        special_requests = payload["specialRequests"] or ""
    booking = await booking_service.update_booking(
        store,
        booking_id,
        status=payload.get("status") or None,
        special_requests=special_requests
    )
    return {"message": "Бронь успешно обновлена", "booking": serialize_booking(booking)}

async def update_booking_request(store: EntityStore, booking_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return await _guarded("Обновление брони", _update_booking(store, booking_id, payload))

async def _delete_booking(store: EntityStore, booking_id: int) -> Dict[str, Any]:
    await booking_service.delete_booking(store, booking_id)
    return {"message": "Бронь успешно удалена"}

async def delete_booking_request(store: EntityStore, booking_id: int) -> Dict[str, Any]:
    return await _guarded("Удаление брони", _delete_booking(store, booking_id))

def _parse_optional_date(params: Dict[str, Any], key: str) -> Optional[datetime]:
    value = params.get(key)
    if not value:
        return None
    try:
        return parse_booking_date(value)
    except ValueError:
        raise ValidationError(f"Некорректная дата в параметре {key}: {value}")

async def _list_bookings(store: EntityStore, params: Dict[str, Any]) -> Dict[str, Any]:
    bookings = await booking_service.list_bookings(
        store,
        date=_parse_optional_date(params, "date"),
        start_date=_parse_optional_date(params, "startDate"),
        end_date=_parse_optional_date(params, "endDate"),
        customer_email=params.get("customerEmail") or None
    )
    return {"bookings": [serialize_booking(b) for b in bookings], "total": len(bookings)}

async def list_bookings_request(store: EntityStore, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return await _guarded("Список броней", _list_bookings(store, params or {}))

async def _list_tables(store: EntityStore) -> Dict[str, Any]:
    tables = await store.get_tables(active_only=True)
    return {"tables": [serialize_table(t) for t in tables], "total": len(tables)}

async def list_tables_request(store: EntityStore) -> Dict[str, Any]:
    return await _guarded("Список столиков", _list_tables(store))

async def _list_customers(store: EntityStore) -> Dict[str, Any]:
    customers = await get_all_customers(store)
    result = []
    for customer in customers:
        data = serialize_customer(customer)
        data["bookings"] = [
            {
                "id": b.id,
                "date": _iso(b.date),
                "status": b.status.value,
                "partySize": b.party_size,
                "tableNumber": b.table.number if b.table else None,
            }
            for b in customer.bookings
        ]
        result.append(data)
    return {"customers": result}

async def list_customers_request(store: EntityStore) -> Dict[str, Any]:
    return await _guarded("Список клиентов", _list_customers(store))

async def _availability(store: EntityStore, params: Dict[str, Any]) -> Dict[str, Any]:
    start = _parse_optional_date(params, "date")
    if not start or params.get("partySize") in (None, ""):
        raise ValidationError("Не заполнены обязательные поля: date, partySize", code="missing_fields")

    tables = await booking_service.find_available_tables(store, start, params["partySize"], params.get("duration"))
    return {
        "available": bool(tables),
        "availableTables": [serialize_table(t) for t in tables],
        "message": f"Свободных столиков: {len(tables)}" if tables else "Нет свободных столиков на это время",
    }

async def availability_request(store: EntityStore, params: Dict[str, Any]) -> Dict[str, Any]:
    return await _guarded("Проверка доступности", _availability(store, params))
