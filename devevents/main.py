import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devevents.core.errors import DevEventsError
from devevents.core.logging_config import configure_logging
from devevents.routes import bookings, events
from devevents.routes.errors import to_http_exception

configure_logging()

app = FastAPI(title="Developer Events API")

# Configure CORS
origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def devevents_error_handler(request: Request, exc: DevEventsError) -> JSONResponse:
    # Also covers errors raised while resolving the get_db dependency
    http_exc = to_http_exception(exc)
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


app.add_exception_handler(DevEventsError, devevents_error_handler)

# The database handle is established lazily on the first request

# Include the routers
app.include_router(events.router)
app.include_router(bookings.router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
