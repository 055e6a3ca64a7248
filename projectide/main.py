"""
Project IDE Backend

FastAPI application serving the Project IDE: project tree, Gemini staging,
generated files and downloads.
"""

import logging
from typing import List, Optional

import httpx
from dotenv import load_dotenv

# Load environment variables before config is read
load_dotenv()

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .ai_client import AIClient
from .config import (
    GEMINI_API_KEY,
    GENERATED_ZIP_NAME,
    HOST,
    PORT,
    PROJECT_ZIP_NAME,
)
from .conversation import Conversation
from .download import (
    build_generated_zip,
    build_project_zip,
    download_name,
    import_into_workspace,
)
from .generated_store import GeneratedFileStore
from .models import (
    AIProfile,
    ApiKeyRequest,
    ApiKeyStatus,
    CreateFileRequest,
    EditorFile,
    ErrorResponse,
    FileListResponse,
    GeneratedFileRef,
    GeneratedFilesResponse,
    Interaction,
    SendToEditorRequest,
    StagingContext,
    SubmitRequest,
    SubmitResponse,
    UpdateFileRequest,
)
from .profiles import AI_PROFILES
from .workspace import Workspace

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Project IDE",
    description="Browser IDE backend with Gemini code generation",
    version="1.0.0",
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session state (singletons)
ai_client: Optional[AIClient] = None
store: Optional[GeneratedFileStore] = None
workspace: Optional[Workspace] = None
conversation: Optional[Conversation] = None

# Transport for the Gemini client; None uses the network
gemini_transport: Optional[httpx.AsyncBaseTransport] = None


@app.on_event("startup")
async def startup_event():
    """Initialize session state on startup."""
    global ai_client, store, workspace, conversation
    ai_client = AIClient(api_key=GEMINI_API_KEY, transport=gemini_transport)
    store = GeneratedFileStore()
    workspace = Workspace()
    conversation = Conversation(ai_client=ai_client, store=store)
    logger.info(f"Project IDE starting on {HOST}:{PORT}")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up services on shutdown."""
    if ai_client:
        await ai_client.close()
    logger.info("Project IDE shut down")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Project IDE",
        "generated_files": len(store) if store is not None else 0,
    }


# ============================================================================
# Profile and Credential Endpoints
# ============================================================================

@app.get("/api/profiles", response_model=List[AIProfile])
async def list_profiles():
    return AI_PROFILES


@app.get("/api/gemini/key", response_model=ApiKeyStatus)
async def get_api_key_status():
    return ApiKeyStatus(configured=ai_client.has_api_key())


@app.put("/api/gemini/key", response_model=ApiKeyStatus)
async def set_api_key(request: ApiKeyRequest):
    """Store the user's Gemini API key for this session."""
    if not request.api_key.strip():
        raise HTTPException(status_code=400, detail="API key must not be empty")
    ai_client.set_api_key(request.api_key.strip())
    return ApiKeyStatus(configured=True)


@app.delete("/api/gemini/key", response_model=ApiKeyStatus)
async def clear_api_key():
    ai_client.set_api_key(None)
    return ApiKeyStatus(configured=False)


# ============================================================================
# Project Tree Endpoints
# ============================================================================

def _file_listing() -> FileListResponse:
    return FileListResponse(
        files=workspace.files,
        open_file_ids=workspace.open_file_ids,
        active_file_id=workspace.active_file_id,
    )


@app.get("/api/files", response_model=FileListResponse)
async def list_files():
    return _file_listing()


@app.post("/api/files", response_model=EditorFile)
async def create_file(request: CreateFileRequest):
    """
    Create a file in the project tree. Taken paths get a numeric suffix.
    """
    try:
        return workspace.create_file(request.path, request.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/files/export")
async def export_project():
    """Download the whole project tree as a ZIP."""
    data = build_project_zip(workspace.files)
    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={PROJECT_ZIP_NAME}"},
    )


@app.get("/api/files/{file_id}", response_model=EditorFile)
async def get_file(file_id: str):
    try:
        return workspace.get(file_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"File not found: {file_id}")


@app.put("/api/files/{file_id}", response_model=EditorFile)
async def update_file(file_id: str, request: UpdateFileRequest):
    try:
        return workspace.update_content(file_id, request.content)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"File not found: {file_id}")


@app.post("/api/files/{file_id}/open", response_model=FileListResponse)
async def open_file(file_id: str):
    try:
        workspace.open_file(file_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"File not found: {file_id}")
    return _file_listing()


@app.post("/api/files/{file_id}/close", response_model=FileListResponse)
async def close_file(file_id: str):
    workspace.close_file(file_id)
    return _file_listing()


# ============================================================================
# Staging Endpoints
# ============================================================================

@app.get("/api/staging/context", response_model=StagingContext)
async def get_staging_context():
    return StagingContext(context=conversation.context)


@app.put("/api/staging/context", response_model=StagingContext)
async def set_staging_context(request: StagingContext):
    conversation.context = request.context
    return StagingContext(context=conversation.context)


@app.delete("/api/staging/context", response_model=StagingContext)
async def clear_staging_context():
    conversation.clear_context()
    return StagingContext(context="")


@app.post("/api/staging/attach/{file_id}", response_model=StagingContext)
async def attach_file_to_context(file_id: str):
    """Append a project file to the staging context."""
    try:
        file = workspace.get(file_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"File not found: {file_id}")
    return StagingContext(context=conversation.attach_editor_file(file))


@app.post("/api/staging/upload", response_model=StagingContext)
async def upload_to_context(upload: UploadFile = File(...)):
    """Append an uploaded text file to the staging context."""
    data = await upload.read()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400,
            detail=f"File is not a text file: {upload.filename}"
        )
    name = upload.filename or "upload.txt"
    logger.info(f"Attached upload to context: {name} ({len(data)} bytes)")
    return StagingContext(context=conversation.attach_upload(name, text))


@app.post("/api/staging/submit", response_model=SubmitResponse)
async def submit_prompt(request: SubmitRequest):
    """
    Send the staged prompt to Gemini and store the files in the reply.
    """
    try:
        result = await conversation.submit(
            prompt=request.prompt,
            profile_name=request.profile,
            image=request.image,
        )
        return SubmitResponse(reply=result.reply, files=result.files)

    except ValueError as e:
        # Blank prompt or missing API key
        logger.warning(f"Submit rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except RuntimeError as e:
        logger.error(f"Gemini error: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@app.post("/api/staging/send_to_editor", response_model=EditorFile)
async def send_to_editor(request: SendToEditorRequest):
    """Create a project file from a block of text."""
    if not request.content:
        raise HTTPException(status_code=400, detail="Content must not be empty")
    return workspace.send_content_to_editor(request.content)


# ============================================================================
# Generated File Endpoints
# ============================================================================

def _lookup(ref: GeneratedFileRef):
    record = store.get(ref.project_name, ref.file_name, ref.version)
    if record is None:
        raise HTTPException(
            status_code=404,
            detail=f"Generated file not found: {ref.project_name}/{ref.file_name} v{ref.version}"
        )
    return record


@app.get("/api/generated", response_model=GeneratedFilesResponse)
async def list_generated():
    """Generated files grouped by project and file, newest version first."""
    return GeneratedFilesResponse(projects=store.grouped(), total=len(store))


@app.delete("/api/generated", response_model=GeneratedFilesResponse)
async def clear_generated():
    store.clear()
    return GeneratedFilesResponse(projects={}, total=0)


@app.get("/api/generated/export")
async def export_generated():
    """Download all generated files as a ZIP, one folder per project."""
    if not len(store):
        raise HTTPException(status_code=404, detail="No generated files to export")
    data = build_generated_zip(store.records)
    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={GENERATED_ZIP_NAME}"},
    )


@app.post("/api/generated/download")
async def download_generated(ref: GeneratedFileRef):
    """Download one generated version as a plain text file."""
    record = _lookup(ref)
    return Response(
        content=record.content,
        media_type="text/plain",
        headers={"Content-Disposition": f"attachment; filename={download_name(record)}"},
    )


@app.post("/api/generated/import", response_model=EditorFile)
async def import_generated(ref: GeneratedFileRef):
    """Copy a generated file into the project tree."""
    return import_into_workspace(_lookup(ref), workspace)


@app.post("/api/generated/stage", response_model=StagingContext)
async def stage_generated(ref: GeneratedFileRef):
    """Put a generated file in front of the staging context for revision."""
    return StagingContext(context=conversation.stage_generated_file(_lookup(ref)))


# ============================================================================
# History Endpoints
# ============================================================================

@app.get("/api/history", response_model=List[Interaction])
async def get_history():
    return conversation.history.items


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom handler for HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            detail=None,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Catch-all handler for unexpected errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc),
        ).model_dump(),
    )


# ============================================================================
# Development Server
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "projectide.main:app",
        host=HOST,
        port=PORT,
        reload=True,
        log_level="info",
    )
