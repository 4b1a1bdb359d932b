from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """接口响应结构基类，字段以驼峰形式输出"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    """只包含提示消息的响应结构，错误响应同样使用该结构"""

    message: str
