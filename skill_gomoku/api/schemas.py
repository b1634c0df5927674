# skill_gomoku/api/schemas.py

import json
import logging
from typing import Any, Dict, Optional

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validates_schema
from marshmallow.validate import Length, OneOf

from skill_gomoku.game_core import ACTION_PLACE, ACTION_USE_SKILL, COLORS

logger = logging.getLogger(__name__)

# --- Base schema ---

class BaseMessageSchema(Schema):
    """Every client message carries a `type`; unknown keys are ignored."""

    class Meta:
        unknown = EXCLUDE

    type = fields.Str(required=True)

# --- Auth ---

class CredentialsSchema(BaseMessageSchema):
    # Blank values are let through: the account store answers them with AuthFailed.
    username = fields.Str(required=True)
    password = fields.Str(required=True)


class TokenSchema(BaseMessageSchema):
    token = fields.Str(required=True)

# --- Rooms ---

class CreateRoomSchema(BaseMessageSchema):
    preferredColor = fields.Str(load_default=None, allow_none=True, validate=OneOf(COLORS))


class JoinRoomSchema(BaseMessageSchema):
    roomId = fields.Str(required=True, validate=Length(min=1))
    playerName = fields.Str(load_default=None, allow_none=True)
    sessionId = fields.Str(load_default=None, allow_none=True)


class RoomRefSchema(BaseMessageSchema):
    roomId = fields.Str(load_default=None, allow_none=True)


class RematchSchema(RoomRefSchema):
    swapColors = fields.Bool(load_default=False)

# --- Actions ---

class ActionSchema(Schema):
    """
    Structural check only. Coordinates, skill names and target shapes are
    judged by the engine so that a bad target is answered with InvalidTarget
    instead of being dropped.
    """

    class Meta:
        unknown = EXCLUDE

    type = fields.Str(required=True, validate=OneOf([ACTION_PLACE, ACTION_USE_SKILL]))
    color = fields.Str(required=True)
    x = fields.Int(strict=True)
    y = fields.Int(strict=True)
    skill = fields.Str()
    target = fields.Dict()

    @validates_schema
    def check_fields_for_type(self, data, **kwargs):
        if data['type'] == ACTION_PLACE:
            missing = [name for name in ('x', 'y') if name not in data]
        else:
            missing = [name for name in ('skill', 'target') if name not in data]
        if missing:
            raise ValidationError(f"Missing fields for {data['type']}: {', '.join(missing)}")


class ActionIntentSchema(RoomRefSchema):
    seq = fields.Int(strict=True, load_default=None, allow_none=True)
    action = fields.Nested(ActionSchema, required=True)

# --- Registry ---

MESSAGE_SCHEMAS: Dict[str, Schema] = {
    'register': CredentialsSchema(),
    'login': CredentialsSchema(),
    'authWithToken': TokenSchema(),
    'listRooms': BaseMessageSchema(),
    'createRoom': CreateRoomSchema(),
    'joinRoom': JoinRoomSchema(),
    'leaveRoom': RoomRefSchema(),
    'ready': RoomRefSchema(),
    'actionIntent': ActionIntentSchema(),
    'rematchRequest': RematchSchema(),
    'ping': BaseMessageSchema(),
}


def load_message(raw: Any) -> Optional[Dict[str, Any]]:
    """
    Validates one inbound message. Accepts a dict or a JSON text frame.
    Returns None for anything that should be dropped.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            logger.debug("[Schemas] Dropping a frame that is not JSON.")
            return None

    if not isinstance(raw, dict):
        return None

    schema = MESSAGE_SCHEMAS.get(raw.get('type'))
    if schema is None:
        logger.debug(f"[Schemas] Dropping unknown message type {raw.get('type')!r}.")
        return None

    try:
        return schema.load(raw)
    except ValidationError as e:
        logger.debug(f"[Schemas] Dropping invalid '{raw.get('type')}' message: {e.messages}")
        return None
