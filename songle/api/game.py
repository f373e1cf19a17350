from flask import Blueprint, jsonify, request

from songle.services.game import get_controller

game = Blueprint('game', __name__)


@game.route('/state', methods=['GET'])
def get_state():
    return jsonify(get_controller().state())


@game.route('/eligibility', methods=['GET'])
def get_eligibility():
    return jsonify(get_controller().eligibility_payload())


@game.route('/start', methods=['POST'])
def start_round():
    """
    Starts a new round with a fresh song, if the daily quota allows it.
    """
    controller = get_controller()
    result = controller.start_round()
    if not result.started:
        payload = result.eligibility.to_dict()
        payload['error'] = 'Daily song limit reached, come back later'
        return jsonify(payload), 403
    return jsonify(controller.state()), 201


@game.route('/exposure', methods=['POST'])
def request_exposure():
    data = request.get_json(silent=True) or {}
    try:
        level = int(data.get('level'))
    except (TypeError, ValueError):
        return jsonify({'error': 'level is required'}), 400
    controller = get_controller()
    if not controller.request_exposure(level):
        return jsonify({'error': 'That preview is not available right now'}), 400
    return jsonify(controller.state())


@game.route('/skip', methods=['POST'])
def skip():
    controller = get_controller()
    if not controller.skip():
        return jsonify({'error': 'Cannot skip at this time'}), 400
    return jsonify(controller.state())


@game.route('/reveal', methods=['POST'])
def reveal():
    controller = get_controller()
    if not controller.reveal():
        return jsonify({'error': 'No round in progress'}), 400
    return jsonify(controller.state())


@game.route('/guess', methods=['POST'])
def submit_guess():
    data = request.get_json(silent=True) or {}
    guess = data.get('guess')
    if not isinstance(guess, str) or not guess.strip():
        return jsonify({'error': 'guess is required'}), 400
    controller = get_controller()
    result = controller.submit_guess(guess)
    if result is None:
        return jsonify({'error': 'Not accepting guesses at this time'}), 400
    return jsonify({
        'correct': result.correct,
        'repeated': result.verdict.repeated,
        'state': controller.state(),
    })
