# fintools/common/response.py

from typing import List, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ErrorResponse:
    @staticmethod
    def send(error: Union[str, List[str]] = "Server Error", status_code: int = 500, headers=None):
        response = {
            "success": False,
            "error": error,
        }
        return JSONResponse(content=jsonable_encoder(response), status_code=status_code, headers=headers)
