"""
Flask Web Application for the Form Generator

Two views: a landing page and the generated form. The browser forwards
each interaction to /api/event; the engine processes it and the
re-rendered form body is sent back.
"""

from flask import Flask, render_template, request, jsonify
import logging
import os

from form_engine.commands import PointerDown, event_from_json
from form_engine.core.form_engine import FormEngine, PointerEventHub
from form_engine.core.spec_loader import DEFAULT_FORM_SPEC_PATH, load_form_spec

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'form-generator-secret-key')
app.config['FORM_SPEC_PATH'] = os.getenv('FORM_SPEC_PATH', DEFAULT_FORM_SPEC_PATH)

# Document-level pointer-down listeners (one per mounted form)
pointer_hub = PointerEventHub()

# The currently mounted form
current_form = {
    'engine': None,
}


def mount_new_form():
    """Unmount any active form and mount a fresh one"""
    unmount_current_form()

    descriptors = load_form_spec(app.config['FORM_SPEC_PATH'])
    engine = FormEngine(descriptors, pointer_hub)
    engine.mount()

    current_form['engine'] = engine
    return engine


def unmount_current_form():
    """Tear down the active form, if any"""
    engine = current_form['engine']
    current_form['engine'] = None
    if engine is not None:
        engine.unmount()


def render_form_body(engine):
    return render_template(
        '_form_body.html',
        sections=engine.render(),
        ui=engine.ui,
        result_json=engine.result_document(),
    )


@app.route('/')
def index():
    """Landing page"""
    return render_template('index.html')


@app.route('/form')
def form():
    """Form page: mounts a fresh form on every load"""
    try:
        engine = mount_new_form()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Error loading form spec: {e}")
        return render_template('error.html', error=str(e)), 500

    return render_template(
        'form.html',
        session_id=engine.session_id,
        sections=engine.render(),
        ui=engine.ui,
        result_json=engine.result_document(),
    )


@app.route('/api/event', methods=['POST'])
def handle_event():
    """Apply one interaction to the active form"""
    engine = current_form['engine']
    if engine is None:
        return jsonify({
            'success': False,
            'error': 'No active form'
        }), 400

    try:
        event = event_from_json(request.get_json(silent=True))

        if isinstance(event, PointerDown):
            # Delivered to every subscribed form, like a document listener
            pointer_hub.dispatch(event)
            snapshot = engine.snapshot
        else:
            snapshot = engine.handle(event)

    except (KeyError, ValueError) as e:
        logger.warning(f"Rejected event: {e}")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400

    except Exception as e:
        logger.error(f"Error handling event: {e}")
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500

    response = {
        'success': True,
        'html': render_form_body(engine),
        'state': snapshot.state.export_for_json(),
        'form_error': snapshot.ui.form_error,
    }
    if snapshot.submit_result is not None:
        response['accepted'] = snapshot.submit_result.accepted
        response['json_output'] = snapshot.submit_result.json_output

    return jsonify(response)


@app.route('/api/unmount', methods=['POST'])
def unmount():
    """Tear the active form down (sent when the page is left)"""
    unmount_current_form()
    return jsonify({'success': True})


if __name__ == '__main__':
    print("\n" + "="*60)
    print("FORM GENERATOR - WEB INTERFACE")
    print("="*60)
    print("\nServer starting...")
    print("Open your browser and go to: http://localhost:5000")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    app.run(debug=False, host='0.0.0.0', port=5000)
