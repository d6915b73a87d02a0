"""
core/validators.py   Schemas with Marshmallow
========================================================
  - ApiEnvelopeSchema : shape of every /api/v3 response body
  - HookResultSchema  : what a `filter:error.handle` listener chain must
                        hand back ({'cases': {code: callable}})
"""

from marshmallow import EXCLUDE, Schema, ValidationError, fields


def _must_be_callable(value):
    if not callable(value):
        raise ValidationError('Handler must be callable.')


# -- API v3 envelope ----------------------------------------

class ApiStatusSchema(Schema):
    code    = fields.Str(required=True)
    message = fields.Str(required=True)


class ApiEnvelopeSchema(Schema):
    status   = fields.Nested(ApiStatusSchema, required=True)
    response = fields.Dict(keys=fields.Str(), dump_default=dict)
    stack    = fields.Str()


# -- Hook results -------------------------------------------

class HookResultSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    cases = fields.Dict(
        keys=fields.Str(),
        values=fields.Raw(validate=_must_be_callable),
        required=True,
    )
