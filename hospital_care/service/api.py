from typing import List, Optional

import pandas as pd
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hospital_care.chatbot.engine import ChatEngine
from hospital_care.common.logging import get_logger
from hospital_care.data.directory import DirectoryError, DoctorDirectory, load_directory
from hospital_care.data.stats import build_admin_summary
from hospital_care.service.schemas import (
    AdminSummaryRequest, AdminSummaryResponse, ChatRequest, ChatResponse,
    DoctorOut, ErrorResponse, HealthResponse,
)

log = get_logger("api")

CHAT_PATH = "/chat-intent"
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

MESSAGE_REQUIRED = "Message is required"
ERROR_REPLY = "I'm sorry, I encountered an error processing your request. Please try again."


def create_app(directory: Optional[DoctorDirectory] = None) -> FastAPI:
    app = FastAPI(title="HospitalCare Chat API", version="1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    app.state.directory = directory if directory is not None else load_directory()
    app.state.engine = ChatEngine(app.state.directory)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        if request.url.path == CHAT_PATH:
            return JSONResponse(status_code=400, content={"error": MESSAGE_REQUIRED})
        return JSONResponse(status_code=422, content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())})

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok", directory=getattr(app.state.directory, "name", "custom"))

    @app.post(
        CHAT_PATH,
        response_model=ChatResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def chat_intent(req: ChatRequest):
        if not req.message or not req.message.strip():
            return JSONResponse(status_code=400, content={"error": MESSAGE_REQUIRED})

        try:
            result = app.state.engine.handle(req.message)
        except Exception as exc:
            log.exception("Error in chat-intent handler")
            return JSONResponse(
                status_code=500,
                content={
                    "error": str(exc) or "An unexpected error occurred",
                    "intent": "error",
                    "response": ERROR_REPLY,
                },
            )

        log.info("Detected intent: %s for message: %s", result.intent, req.message)
        return ChatResponse(intent=result.intent, response=result.response)

    @app.get("/doctors", response_model=List[DoctorOut])
    def doctors(specialty: Optional[str] = None):
        try:
            if specialty:
                found = app.state.directory.by_specialty(specialty)
            else:
                found = app.state.directory.list_all()
        except DirectoryError as exc:
            log.warning("Doctor listing failed, returning empty list: %s", exc)
            found = []
        return [DoctorOut(**d.to_dict()) for d in found]

    @app.post("/admin/summary", response_model=AdminSummaryResponse)
    def admin_summary(req: AdminSummaryRequest):
        return build_admin_summary(
            pd.DataFrame(req.appointments), pd.DataFrame(req.conversations)
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
