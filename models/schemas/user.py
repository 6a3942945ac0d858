from marshmallow import Schema, fields, pre_load, validates, ValidationError, validate


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _EmailNormalizingSchema(Schema):
    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserCreateSchema(_EmailNormalizingSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class UserUpdateSchema(UserCreateSchema):
    """PUT /users replaces both fields, so the create rules apply as is."""


class UserLoginSchema(_EmailNormalizingSchema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)
    expires_in_seconds = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=0))


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    is_chirpy_red = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
