"""
Text Style Renderer - Flask Backend
"""
import os
from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

# Import logging (must be after dotenv for LOG_DIR/LOG_LEVEL env vars)
from text_style.logging_config import setup_logging, get_logger

# Initialize logging (console only under tests)
setup_logging(log_to_file=os.getenv('TESTING', '').lower() != 'true')
logger = get_logger('app')

from preset_routes import preset_bp

app = Flask(__name__)
CORS(app)

# Register text preset blueprint
app.register_blueprint(preset_bp)


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({'status': 'ok', 'message': 'Text Style Renderer API is running'})


if __name__ == '__main__':
    port = int(os.getenv('PORT', '5000'))
    logger.info(f"Starting server on port {port}")
    app.run(host='0.0.0.0', port=port, debug=os.getenv('FLASK_DEBUG', '').lower() == 'true')
