"""File browser route registration: list, upload and delete under the server directory."""
from flask import jsonify, request

from hypanel.core.errors import PanelError
from hypanel.core.filesystem_utils import list_directory, remove_path, save_uploads, upload_name_changes
from hypanel.core.response_helpers import error_response, ok_response


def register_file_routes(app, state):
    """Register routes whose paths all pass through the scoped resolver."""
    resolver = state.resolver

    # Route: /api/files
    @app.route("/api/files")
    def list_files():
        requested = request.args.get("path", "")
        try:
            return jsonify(list_directory(resolver, requested))
        except PanelError as exc:
            state.log_action("list-files", command=requested, rejection_message=exc.log_message)
            raise

    # Route: /api/files/upload
    @app.route("/api/files/upload", methods=["POST"])
    def upload_files():
        """Store multipart ``files`` (or ``file``) under ``?path=``.

        Names are reduced with ``secure_filename``, which drops non-ASCII
        characters, so two uploads can land on the same name and the later one
        wins. Every rename, skip and collision is written to the action log.
        """
        requested = request.args.get("path", "")
        uploads = request.files.getlist("files") + request.files.getlist("file")
        uploads = [item for item in uploads if item and item.filename]
        if not uploads:
            state.log_action("upload", command=requested, rejection_message="No files in request.")
            return error_response("no_files", "No files were uploaded.", 400)
        for original, name, note in upload_name_changes(uploads):
            state.log_action("upload-rename", command=f"{original} -> {name or '-'} ({note})")
        try:
            saved = save_uploads(resolver, requested, uploads)
        except PanelError as exc:
            state.log_action("upload", command=requested, rejection_message=exc.log_message)
            raise
        if not saved:
            state.log_action("upload", command=requested, rejection_message="No valid file names.")
            return error_response("no_files", "No uploaded file had a usable name.", 400)
        state.log_action("upload", command=", ".join(saved))
        return ok_response(files=saved, message=f"Uploaded {len(saved)} file(s).")

    # Route: /api/files/<path:requested>
    @app.route("/api/files/<path:requested>", methods=["DELETE"])
    def delete_file(requested):
        try:
            removed = remove_path(resolver, requested)
        except PanelError as exc:
            state.log_action("delete-file", command=requested, rejection_message=exc.log_message)
            raise
        state.log_action("delete-file", command=removed)
        return ok_response(path=removed, message="Deleted.")
