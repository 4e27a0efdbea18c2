# /exam-portal/app/services/ingestion_helpers/docx_converter.py

import base64
import io

import mammoth


def _embed_image(image) -> dict:
    # Images are inlined as data URIs so they survive without a file store.
    with image.open() as image_bytes:
        encoded_src = base64.b64encode(image_bytes.read()).decode("ascii")
    return {"src": f"data:{image.content_type};base64,{encoded_src}"}


def convert_docx_to_html(file_bytes: bytes) -> str:
    """Converts a .docx document to simplified HTML with embedded images."""
    if not file_bytes:
        raise ValueError("The Word document is empty.")
    result = mammoth.convert_to_html(
        io.BytesIO(file_bytes),
        convert_image=mammoth.images.img_element(_embed_image),
    )
    for message in result.messages:
        print(f"WARNING: Word conversion: {message}")
    return result.value
