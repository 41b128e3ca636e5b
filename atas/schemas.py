"""
Marshmallow schemas para validação de dados
"""

from marshmallow import EXCLUDE, INCLUDE, Schema, fields, post_load, validate
from marshmallow import ValidationError as SchemaValidationError

from atas.exceptions import ValidationError
from atas.forms.defaults import SECTION_TYPES


class BlockSchema(Schema):
    """Bloco de conteúdo de uma seção"""

    class Meta:
        unknown = INCLUDE

    title = fields.Str(load_default="", allow_none=True)
    content = fields.Str(load_default="", allow_none=True)
    assunto = fields.Str(load_default="", allow_none=True)
    responsavel = fields.Str(load_default="", allow_none=True)

    @post_load
    def coalesce_none(self, data, **kwargs):
        for key in ("title", "content", "assunto", "responsavel"):
            if data.get(key) is None:
                data[key] = ""
        return data


class SectionSchema(Schema):
    """Seção da ata (tipo pertence à enumeração fechada)"""

    class Meta:
        unknown = INCLUDE

    type = fields.Str(
        required=True,
        validate=validate.OneOf(list(SECTION_TYPES)),
        error_messages={"required": "Tipo da seção é obrigatório"},
    )
    title = fields.Str(load_default="")
    blocks = fields.List(
        fields.Nested(BlockSchema),
        required=True,
        error_messages={"required": "Blocos da seção são obrigatórios"},
    )
    completed = fields.Bool(load_default=False)


class FormUpdateSchema(Schema):
    """Corpo de POST /update/<formId>; todos os campos são opcionais"""

    class Meta:
        unknown = EXCLUDE

    sectionsList = fields.List(fields.Nested(SectionSchema), allow_none=True)
    headerData = fields.Dict(keys=fields.Str(), allow_none=True)
    formInfo = fields.Dict(keys=fields.Str(), allow_none=True)
    pdfGerado = fields.Bool(allow_none=True)


class GenerateReportSchema(Schema):
    """Corpo de POST /generate/<formId>"""

    class Meta:
        unknown = EXCLUDE

    sections = fields.Dict(keys=fields.Str(), required=True)
    headerData = fields.Dict(keys=fields.Str(), required=True)
    formInfo = fields.Dict(keys=fields.Str(), load_default=None, allow_none=True)


def load_payload(schema: Schema, data, message: str = "Dados inválidos."):
    """Valida o corpo da requisição, convertendo erros para ValidationError"""
    if not isinstance(data, dict):
        raise ValidationError(message)
    try:
        return schema.load(data)
    except SchemaValidationError as e:
        raise ValidationError(message, details=e.messages) from e
