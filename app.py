from flask import Flask, request, jsonify, send_file
from werkzeug.exceptions import HTTPException
from pathlib import Path
import logging
import sys, os

sys.path.insert(0, str(Path(__file__).parent / 'src'))

from processors.salary_calculator import to_offer_letter_fields
from processors.offer_letter_processor import OfferLetterProcessor, OfferLetterNotFound
from processors.salary_breakup_generator import SalaryBreakupGenerator
from database.db import init_db, SessionLocal
from database.repository import OfferLetterRepository
from config.settings import SECRET_KEY, DEBUG, LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = SECRET_KEY
app.config['DEBUG'] = DEBUG

init_db()


def error_response(message, status):
    return jsonify({'success': False, 'message': message}), status


@app.errorhandler(ValueError)
def handle_value_error(e):
    return error_response(str(e), 400)


@app.errorhandler(OfferLetterNotFound)
def handle_not_found(e):
    return error_response(str(e), 404)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return error_response("Internal server error", 500)


def with_processor(handler):
    """Run handler with an OfferLetterProcessor bound to a fresh session"""
    db = SessionLocal()
    try:
        return handler(OfferLetterProcessor(OfferLetterRepository(db)))
    finally:
        db.close()


def request_data() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data

# ============================================================================
# Salary Breakup
# ============================================================================

@app.route('/api/salary/breakup', methods=['POST'])
def salary_breakup():
    """Preview the CTC breakup for an offer"""
    data = request_data()

    def handler(processor):
        breakup = processor.preview(data.get('ctc'), data.get('tds'))
        return jsonify({
            'success': True,
            'breakup': breakup.to_dict(),
            'fields': to_offer_letter_fields(breakup).to_dict()
        })

    return with_processor(handler)

# ============================================================================
# Offer Letters
# ============================================================================

@app.route('/api/offer-letters')
def list_offer_letters():
    """Get all offer letters"""
    return with_processor(
        lambda processor: jsonify([o.to_dict() for o in processor.repo.get_offer_letters()])
    )


@app.route('/api/offer-letters/<offer_id>')
def get_offer_letter(offer_id):
    """Get one offer letter"""
    return with_processor(lambda processor: jsonify(processor.get_offer(offer_id).to_dict()))


@app.route('/api/offer-letters', methods=['POST'])
def create_offer_letter():
    """Create a draft offer letter from a CTC"""
    data = request_data()

    def handler(processor):
        offer_letter = processor.create_offer(processor.build_request(data))
        return jsonify({
            'success': True,
            'message': 'Offer letter created successfully',
            'data': offer_letter.to_dict(),
            'salaryBreakdown': processor.breakup_for(offer_letter.id).to_dict()
        }), 201

    return with_processor(handler)


@app.route('/api/offer-letters/<offer_id>', methods=['PUT'])
def update_offer_letter(offer_id):
    """Edit details of a draft and recalculate its salary when ctc or tds is given"""
    data = request_data()
    return with_processor(lambda processor: jsonify(processor.edit_draft(offer_id, data).to_dict()))


@app.route('/api/offer-letters/<offer_id>', methods=['DELETE'])
def delete_offer_letter(offer_id):
    """Delete an offer letter"""
    def handler(processor):
        if not processor.repo.delete_offer_letter(offer_id):
            return error_response('Offer letter not found', 404)
        return jsonify({'success': True, 'message': 'Offer letter deleted successfully'})

    return with_processor(handler)


@app.route('/api/offer-letters/bulk-delete', methods=['POST'])
def bulk_delete_offer_letters():
    """Delete several offer letters"""
    ids = request_data().get('ids')
    if not isinstance(ids, list) or not ids:
        return error_response('Invalid or empty offer letter IDs array', 400)

    def handler(processor):
        deleted = processor.repo.bulk_delete_offer_letters(ids)
        return jsonify({
            'success': True,
            'message': f"{deleted} offer letter{'s' if deleted != 1 else ''} deleted successfully"
        })

    return with_processor(handler)


@app.route('/api/offer-letters/bulk-import', methods=['POST'])
def bulk_import_offer_letters():
    """Create offer letters from a list of rows"""
    rows = request_data().get('offerLetters')
    if not isinstance(rows, list) or not rows:
        return error_response('Invalid or empty offer letters array', 400)

    def handler(processor):
        created = processor.bulk_import(rows)
        return jsonify({
            'success': True,
            'message': f"{len(created)} offer letter{'s' if len(created) != 1 else ''} imported successfully",
            'offerLetters': [o.to_dict() for o in created]
        }), 201

    return with_processor(handler)


@app.route('/api/offer-letters/<offer_id>/<action>', methods=['POST'])
def change_offer_status(offer_id, action):
    """Send, accept or reject an offer letter"""
    actions = {'send': 'mark_sent', 'accept': 'accept', 'reject': 'reject'}
    if action not in actions:
        return error_response(f'Unknown action {action}', 404)

    return with_processor(
        lambda processor: jsonify(getattr(processor, actions[action])(offer_id).to_dict())
    )


@app.route('/api/applications/<application_id>/offer-letters')
def offer_letters_by_application(application_id):
    """Get offer letters for an application"""
    return with_processor(
        lambda processor: jsonify([
            o.to_dict() for o in processor.repo.get_offer_letters_by_application(application_id)
        ])
    )


@app.route('/api/offer-letters/<offer_id>/annexure')
def download_annexure(offer_id):
    """Download the salary breakdown annexure as Excel"""
    def handler(processor):
        offer_letter = processor.get_offer(offer_id)
        filepath = SalaryBreakupGenerator().generate(
            processor.breakup_for(offer_id),
            offer_letter.ctc,
            candidate_name=offer_letter.candidate_id,
            designation=offer_letter.designation,
            offer_id=offer_letter.id,
            offer_date=offer_letter.offer_date
        )
        return send_file(filepath, as_attachment=True)

    return with_processor(handler)


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    app.run(host='0.0.0.0', port=port)
