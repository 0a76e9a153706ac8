"""
File: app/core/messages.py
Description: 全局消息注册表 (HTTP 状态码 -> 消息类别 -> 展示文案)

本模块是全站响应文案与状态码的唯一来源：
1. MESSAGES: 以 HTTP 状态码分桶的静态常量表，文案为西班牙语
2. resolve(): 根据消息类别反查其所属状态码与文案
3. all_categories(): 枚举全部已注册类别 (供类别使用情况校验)

约束：
- 消息类别在整张表内全局唯一 (而非仅在单个状态码桶内唯一)，
  模块导入时即校验，出现重复直接失败。
- 类别前缀 AUTH_ / USER_ / SCHEDULE_ / RESERVATION_ / APP_ 仅为命名约定。
- 表在导入后只读，可被并发请求无锁读取。

Author: jinmozhe
Created: 2026-10-19
"""

from collections.abc import Iterator

from starlette.status import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

MESSAGES: dict[int, dict[str, str]] = {
    HTTP_200_OK: {
        "APP_WELCOME": "API de Reservas de Piscina",
        "APP_HEALTH_OK": "Servicio operativo",
        "AUTH_LOGIN": "Inicio de sesión exitoso",
        "AUTH_PROFILE_RETRIEVED": "Perfil obtenido correctamente",
        "AUTH_PROFILE_UPDATED": "Perfil actualizado correctamente",
        "USER_LIST_RETRIEVED": "Lista de usuarios obtenida correctamente",
        "USER_RETRIEVED": "Usuario obtenido correctamente",
        "SCHEDULE_LIST_RETRIEVED": "Horarios obtenidos correctamente",
        "SCHEDULE_RETRIEVED": "Horario obtenido correctamente",
        "SCHEDULE_UPDATED": "Horario actualizado correctamente",
        "SCHEDULE_DELETED": "Horario eliminado correctamente",
        "SCHEDULE_DEACTIVATED": (
            "Horario desactivado correctamente. No se eliminó completamente "
            "debido a que tiene reservas asociadas."
        ),
        "SCHEDULE_AVAILABILITY_RETRIEVED": "Disponibilidad obtenida correctamente",
        "RESERVATION_LIST_RETRIEVED": "Reservas obtenidas correctamente",
        "RESERVATION_RETRIEVED": "Reserva obtenida correctamente",
        "RESERVATION_CANCELLED": "Reserva cancelada correctamente",
        "RESERVATION_PAYMENT_CONFIRMED": "Pago confirmado correctamente",
        "RESERVATION_COMPLETED": "Reserva marcada como completada",
    },
    HTTP_201_CREATED: {
        "AUTH_REGISTER": "Usuario registrado correctamente",
        "USER_CREATED": "Usuario creado correctamente",
        "SCHEDULE_CREATED": "Horario creado correctamente",
        "RESERVATION_CREATED": "Reserva creada correctamente",
    },
    HTTP_400_BAD_REQUEST: {
        "APP_INVALID_PARAMS": "Parámetros de la solicitud inválidos",
        "AUTH_MISSING_CREDENTIALS": "Por favor proporciona email y contraseña",
        "AUTH_MISSING_REGISTER_DATA": "Por favor proporciona email, contraseña y nombre",
        "AUTH_EMAIL_ALREADY_EXISTS": "Este email ya está registrado",
        "AUTH_MISSING_CURRENT_PASSWORD": "Debes proporcionar tu contraseña actual",
        "USER_MISSING_REQUIRED_FIELDS": "Email, contraseña y nombre son requeridos",
        "USER_EMAIL_ALREADY_EXISTS": "Este email ya está registrado",
        "USER_INVALID_ID": "ID de usuario inválido",
        "SCHEDULE_MISSING_REQUIRED_FIELDS": (
            "Por favor proporciona todos los campos requeridos: día de la semana, "
            "hora de inicio, hora de fin, capacidad máxima y número de carriles"
        ),
        "SCHEDULE_INVALID_TIME_RANGE": "La hora de fin debe ser posterior a la hora de inicio",
        "SCHEDULE_MISSING_AVAILABILITY_PARAMS": "Por favor proporciona el ID del horario y la fecha",
        "RESERVATION_MISSING_REQUIRED_FIELDS": "Por favor proporciona el ID del horario y la fecha",
        "RESERVATION_SCHEDULE_INACTIVE": "Este horario no está disponible",
        "RESERVATION_NO_AVAILABILITY": (
            "No hay cupos disponibles para este horario en la fecha seleccionada"
        ),
        "RESERVATION_ALREADY_EXISTS": (
            "Ya tienes una reserva para este horario en la fecha seleccionada"
        ),
        "RESERVATION_CANCEL_COMPLETED": "No se puede cancelar una reserva ya completada",
        "RESERVATION_MISSING_PAYMENT_DATA": "Por favor proporciona el monto y método de pago",
        "RESERVATION_PAYMENT_CANCELLED": (
            "No se puede confirmar el pago de una reserva cancelada"
        ),
        "RESERVATION_COMPLETE_CANCELLED": "No se puede completar una reserva cancelada",
    },
    HTTP_401_UNAUTHORIZED: {
        "AUTH_NOT_AUTHENTICATED": "No estás autenticado",
        "AUTH_NOT_AUTHORIZED": "No estás autorizado para acceder a este recurso",
        "AUTH_TOKEN_INVALID": "Token inválido o expirado",
        "AUTH_INVALID_CREDENTIALS": "Credenciales inválidas",
        "AUTH_ACCOUNT_DISABLED": (
            "Tu cuenta está desactivada. Por favor contacta al administrador."
        ),
        "AUTH_WRONG_CURRENT_PASSWORD": "Contraseña actual incorrecta",
    },
    HTTP_403_FORBIDDEN: {
        "AUTH_INSUFFICIENT_PERMISSIONS": "No tienes permiso para realizar esta acción",
        "RESERVATION_FORBIDDEN": "No tienes permiso para acceder a esta reserva",
    },
    HTTP_404_NOT_FOUND: {
        "APP_ROUTE_NOT_FOUND": "Ruta no encontrada",
        "AUTH_USER_NOT_FOUND": "Usuario no encontrado",
        "USER_NOT_FOUND": "Usuario no encontrado",
        "SCHEDULE_NOT_FOUND": "Horario no encontrado",
        "RESERVATION_NOT_FOUND": "Reserva no encontrada",
    },
    HTTP_405_METHOD_NOT_ALLOWED: {
        "APP_METHOD_NOT_ALLOWED": "Método no permitido",
    },
    HTTP_500_INTERNAL_SERVER_ERROR: {
        "APP_INTERNAL_ERROR": "Error interno del servidor",
        "AUTH_REGISTER_ERROR": "Error al registrar usuario",
        "AUTH_LOGIN_ERROR": "Error al iniciar sesión",
        "AUTH_PROFILE_ERROR": "Error al obtener información del perfil",
        "AUTH_UPDATE_ERROR": "Error al actualizar perfil",
        "USER_FETCH_ERROR": "Error al obtener usuarios",
        "USER_CREATE_ERROR": "Error al crear usuario",
        "SCHEDULE_FETCH_ERROR": "Error al obtener horarios de natación",
        "SCHEDULE_CREATE_ERROR": "Error al crear horario de natación",
        "SCHEDULE_UPDATE_ERROR": "Error al actualizar horario de natación",
        "SCHEDULE_DELETE_ERROR": "Error al eliminar horario de natación",
        "SCHEDULE_AVAILABILITY_ERROR": "Error al verificar disponibilidad del horario",
        "RESERVATION_FETCH_ERROR": "Error al obtener reservas",
        "RESERVATION_CREATE_ERROR": "Error al crear reserva",
        "RESERVATION_CANCEL_ERROR": "Error al cancelar reserva",
        "RESERVATION_PAYMENT_ERROR": "Error al confirmar pago de la reserva",
        "RESERVATION_COMPLETE_ERROR": "Error al marcar reserva como completada",
    },
}


class UnknownMessageCategory(LookupError):
    """消息类别未注册 (调用方配置错误，不应被业务代码捕获)"""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f'Category "{category}" not found in any status code')


def _build_index(registry: dict[int, dict[str, str]]) -> dict[str, int]:
    """构建 类别 -> 状态码 反向索引，同时校验类别全局唯一"""
    index: dict[str, int] = {}
    for status_code, bucket in registry.items():
        for category in bucket:
            if category in index:
                raise ValueError(
                    f'Category "{category}" registered under both '
                    f"{index[category]} and {status_code}"
                )
            index[category] = status_code
    return index


_CATEGORY_INDEX: dict[str, int] = _build_index(MESSAGES)


def resolve(category: str) -> tuple[int, str]:
    """
    解析消息类别。

    Returns:
        (status_code, text)

    Raises:
        UnknownMessageCategory: 类别不存在于任何状态码桶
    """
    try:
        status_code = _CATEGORY_INDEX[category]
    except KeyError:
        raise UnknownMessageCategory(category) from None
    return status_code, MESSAGES[status_code][category]


def all_categories() -> Iterator[str]:
    """按注册顺序枚举全部消息类别"""
    for bucket in MESSAGES.values():
        yield from bucket
