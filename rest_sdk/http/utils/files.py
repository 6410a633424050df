import mimetypes
import os
from contextlib import ExitStack
from typing import BinaryIO, Iterable, List, Optional, Tuple

from rest_sdk.config import DEFAULT_FILE_CONTENT_TYPE
from rest_sdk.http.entities import FileParameter, FileSource, StreamProvider
from rest_sdk.http.errors import InvalidArgumentError

MultipartFile = Tuple[str, Tuple[str, BinaryIO, str]]


def file_from_path(
    name: str,
    path: str,
    content_type: Optional[str] = None,
) -> FileParameter:
    """Create a file parameter read from disk at send time.

    Only the path is captured; the size and the content are read when the
    request is sent, so the file may still change before dispatch.

    Args:
        name: The form field name.
        path: Path of the file to upload.
        content_type: MIME type; guessed from the file name when omitted.

    Returns:
        The file parameter.
    """
    _ensure_field_name(name=name)
    if not path:
        raise InvalidArgumentError("Path of the file to upload must be provided")
    file_name = os.path.basename(path)
    _ensure_file_name(file_name=file_name)
    return FileParameter(
        name=name,
        file_name=file_name,
        source=FileSource.PATH,
        content_type=content_type or guess_content_type(file_name=file_name),
        path=path,
    )


def file_from_bytes(
    name: str,
    data: bytes,
    file_name: str,
    content_type: Optional[str] = None,
) -> FileParameter:
    _ensure_field_name(name=name)
    _ensure_file_name(file_name=file_name)
    if not isinstance(data, (bytes, bytearray)):
        raise InvalidArgumentError(
            f"File content must be bytes, got {type(data).__name__}"
        )
    return FileParameter(
        name=name,
        file_name=file_name,
        source=FileSource.BYTES,
        content_type=content_type,
        data=bytes(data),
    )


def file_from_stream_provider(
    name: str,
    get_file: StreamProvider,
    file_name: str,
    content_length: int,
    content_type: Optional[str] = None,
) -> FileParameter:
    """Create a file parameter whose content comes from a stream factory.

    `get_file` is not called here. The transport calls it once per send
    attempt and reads the returned stream without closing it.

    Args:
        name: The form field name.
        get_file: Zero-argument callable returning a readable binary stream.
        file_name: The file name reported to the server.
        content_length: Size of the content in bytes.
        content_type: MIME type, or None to let the transport infer it.

    Returns:
        The file parameter.
    """
    _ensure_field_name(name=name)
    _ensure_file_name(file_name=file_name)
    if not callable(get_file):
        raise InvalidArgumentError("Stream provider must be a callable")
    if (
        isinstance(content_length, bool)
        or not isinstance(content_length, int)
        or content_length < 0
    ):
        raise InvalidArgumentError(
            f"Content length must be a non-negative integer, got {content_length!r}"
        )
    return FileParameter(
        name=name,
        file_name=file_name,
        source=FileSource.STREAM_PROVIDER,
        content_type=content_type,
        get_file=get_file,
        declared_length=content_length,
    )


def guess_content_type(file_name: str) -> str:
    content_type, _ = mimetypes.guess_type(file_name)
    return content_type or DEFAULT_FILE_CONTENT_TYPE


def open_multipart_files(
    files: Iterable[FileParameter], exit_stack: ExitStack
) -> List[MultipartFile]:
    """Open file streams for one send attempt in `requests` multipart format.

    Streams owned by this package are registered on `exit_stack` for closing.
    Streams returned by stream providers are left open.

    Args:
        files: The file parameters of the request.
        exit_stack: Stack collecting streams to close after the attempt.

    Returns:
        List of `(field_name, (file_name, stream, content_type))` entries.
    """
    result = []
    for file_parameter in files:
        stream = file_parameter.open()
        if file_parameter.owns_stream:
            exit_stack.enter_context(stream)
        content_type = file_parameter.content_type or guess_content_type(
            file_name=file_parameter.file_name
        )
        result.append(
            (file_parameter.name, (file_parameter.file_name, stream, content_type))
        )
    return result


def _ensure_field_name(name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"File field name must not be empty, got {name!r}")


def _ensure_file_name(file_name: str) -> None:
    if not isinstance(file_name, str) or not file_name.strip():
        raise InvalidArgumentError(f"File name must not be empty, got {file_name!r}")
