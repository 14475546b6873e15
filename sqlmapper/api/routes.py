import base64
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from sqlmapper.config import config
from sqlmapper.services.sql_conversion import ConversionOrchestrator, SQLMapperError, convert_with_report
from sqlmapper.services.sql_conversion.dialects import DIALECTS, normalize_dialect
from sqlmapper.services.sql_conversion.errors import ErrorKind
from sqlmapper.services.sql_conversion.types import Value, Version, convert_type
from sqlmapper.services.sql_conversion.utils.dialect_utils import detect_source_dialect
from sqlmapper.utils.logger import setup_logger
from sqlmapper.utils.timing import timed

api_router = APIRouter(prefix='/api/v1')

logger = setup_logger('api_routes')

# Caller mistakes (bad tags, empty input) are 400; input the converter could not handle is 422.
_BAD_REQUEST_KINDS = {ErrorKind.UNKNOWN_DIALECT, ErrorKind.EMPTY_INPUT, ErrorKind.NIL_SCHEMA}


def _error_response(error: SQLMapperError) -> JSONResponse:
    status_code = 400 if error.kind in _BAD_REQUEST_KINDS else 422
    return JSONResponse({'status': 'error', 'error': error.to_dict()}, status_code=status_code)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({'status': 'error', 'error': {'kind': 'BadRequest', 'message': message}}, status_code=400)


def _value_payload(value: Value) -> Dict[str, Any]:
    payload = value.to_python()
    if isinstance(payload, datetime):
        payload = payload.isoformat()
    elif isinstance(payload, bytes):
        payload = base64.b64encode(payload).decode('ascii')
    return {'kind': value.kind.value, 'value': payload}


@api_router.get('/')
def index():
    return {'service': 'sqlmapper', 'version': config.get('api', {}).get('version', 'v1')}


@api_router.get('/dialects')
def list_dialects():
    versions = (config.get('conversion') or {}).get('default_versions') or {}
    return {
        'dialects': [
            {
                'tag': name,
                'name': descriptor.display_name,
                'default_version': versions.get(name),
                'max_identifier_length': descriptor.identifier_limit(Version.parse(versions.get(name))),
            }
            for name, descriptor in DIALECTS.items()
        ]
    }


@api_router.post('/convert')
def convert_sql(payload: Dict[str, Any] = Body(...)):
    """Convert a DDL script posted as ``sql``; ``source_dialect`` is sniffed when omitted."""
    sql = payload.get('sql')
    target = payload.get('target_dialect')
    if not isinstance(sql, str) or not target:
        return _bad_request('Missing required fields: sql, target_dialect')

    source = payload.get('source_dialect') or detect_source_dialect(sql)
    if not source:
        return _bad_request('Could not detect the source dialect; provide source_dialect')

    try:
        report = convert_with_report(
            sql, source, target,
            validate=payload.get('validate'),
            quote_identifiers=payload.get('quote_identifiers'),
            on_unsupported=payload.get('on_unsupported'),
            version=payload.get('target_version'),
        )
    except SQLMapperError as e:
        logger.info(f"/convert rejected: {e}")
        return _error_response(e)
    except ValueError as e:
        return _bad_request(str(e))

    return {'status': 'success', **report.to_dict()}


@api_router.post('/types/convert')
def convert_value(payload: Dict[str, Any] = Body(...)):
    """Re-encode one value between two column types (``tinyint(1)`` 1 -> ``boolean`` true)."""
    source_type = payload.get('source_type')
    target_type = payload.get('target_type')
    if not source_type or not target_type or 'value' not in payload:
        return _bad_request('Missing required fields: value, source_type, target_type')

    try:
        value = convert_type(payload['value'], source_type, target_type,
                             payload.get('source_version'), payload.get('target_version'))
    except SQLMapperError as e:
        return _error_response(e)
    except (TypeError, ValueError) as e:
        return JSONResponse({'status': 'error', 'error': {'kind': 'InvalidValue', 'message': str(e)}},
                            status_code=422)

    return {'status': 'success', 'source_type': source_type, 'target_type': target_type, **_value_payload(value)}


@api_router.post('/batch')
def convert_batch(payload: Dict[str, Any] = Body(...)):
    """Convert every .sql file under ``input_path`` on the server."""
    input_path = payload.get('input_path')
    target = payload.get('target_dialect')
    if not input_path or not target:
        return _bad_request('Missing required fields: input_path, target_dialect')

    try:
        source = normalize_dialect(payload['source_dialect']) if payload.get('source_dialect') else None
        orchestrator = ConversionOrchestrator(source, target, output_dir=payload.get('output_dir'),
                                              validate=payload.get('validate'))
    except SQLMapperError as e:
        return _error_response(e)

    result = timed(orchestrator.convert, input_path)
    if result['status'] == 'error' and not result.get('files'):
        return JSONResponse(result, status_code=400)
    return result
