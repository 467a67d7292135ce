"""
Lease document storage.

Uploaded files are saved under <UPLOAD_FOLDER>/leases with a generated name;
the original file name is kept on the LeaseDocument row for display.

Removal policy: deleting a document (or a lease) removes files first on a
best-effort basis. A failed removal is logged and never blocks the database
delete, so an orphaned file is possible but a dangling row is not.
"""
import os
import uuid
from flask import current_app, abort
from models import LeaseDocument

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'pdf', 'doc', 'docx', 'txt'}
LEASE_SUBFOLDER = 'leases'


def _extension(filename):
    if '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1].lower()


def allowed_document(filename):
    return _extension(filename) in ALLOWED_EXTENSIONS


def _file_size(file):
    stream = file.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def collect_uploads(files, document_types, descriptions):
    """
    Pair each non-empty upload with its positional type and description.
    Aborts with 400 on a disallowed type or an oversized file, before
    anything is written.
    """
    max_bytes = current_app.config['LEASE_DOCUMENT_MAX_BYTES']
    uploads = []
    for i, file in enumerate(files):
        if not file or not file.filename:
            continue
        if not allowed_document(file.filename):
            abort(400, description=f"File type not allowed: {file.filename}")
        if _file_size(file) > max_bytes:
            abort(400, description=f"File too large: {file.filename}")
        doc_type = document_types[i] if i < len(document_types) else None
        description = descriptions[i] if i < len(descriptions) else None
        uploads.append((file, (doc_type or '').strip() or 'other', (description or '').strip() or None))
    return uploads


def upload_root():
    return current_app.config['UPLOAD_FOLDER']


def absolute_path(relative_path):
    return os.path.join(upload_root(), relative_path)


def store_upload(file):
    """Save to disk under a generated unique name; returns the path relative to UPLOAD_FOLDER."""
    ext = _extension(file.filename)
    stored_name = uuid.uuid4().hex + (f".{ext}" if ext else '')
    folder = os.path.join(upload_root(), LEASE_SUBFOLDER)
    os.makedirs(folder, exist_ok=True)
    file.save(os.path.join(folder, stored_name))
    return f"{LEASE_SUBFOLDER}/{stored_name}"


def attach_documents(lease, uploads):
    """Store the files and add one LeaseDocument per file to the lease (not committed)."""
    for file, doc_type, description in uploads:
        relative_path = store_upload(file)
        lease.documents.append(LeaseDocument(
            document_type=doc_type,
            file_name=file.filename,
            file_path=relative_path,
            description=description,
        ))


def remove_document_file(document):
    """Best-effort file removal. Returns True if the file is gone."""
    path = absolute_path(document.file_path)
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        current_app.logger.warning("Lease document file already missing: %s", path)
        return True
    except OSError as e:
        current_app.logger.warning("Could not remove lease document file %s: %s", path, e)
        return False
