"""
API endpoint for text → JSON conversion.

POST /v1/convert/text-to-json: Basic-authenticated multipart upload of a .txt file
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from txt2json.services.handler import ConversionHandler

router = APIRouter()


def get_handler(request: Request) -> ConversionHandler:
    return request.app.state.handler


@router.post("/v1/convert/text-to-json")
async def convert_text_to_json(
    request: Request,
    handler: ConversionHandler = Depends(get_handler),
) -> JSONResponse:
    """
    Convert an uploaded plain text file into structured per-line JSON.

    Expects `Authorization: Basic <base64(username:password)>` and a
    multipart/form-data body whose file part holds a .txt file of at most 10MB.
    The raw headers and body are handed to the handler, which owns auth,
    parsing and validation so every failure gets the same error envelope.
    """
    body = await request.body()
    result = await handler.handle(
        request.headers.get("authorization"),
        request.headers.get("content-type"),
        body,
    )
    return JSONResponse(content=result.body, status_code=result.status_code, headers=result.headers)
