import eventlet
eventlet.monkey_patch()

import argparse
from skill_gomoku import create_app

print("[run.py] Eventlet monkey-patch applied.")

app, socketio = create_app()

if __name__ == '__main__':

    parser = argparse.ArgumentParser(description='Runs the Skill Gomoku Flask-SocketIO server.')

    parser.add_argument(
        '-e', '--env',
        default='local',
        choices=['local', 'prod'],
        help='local (development, debug on 127.0.0.1) or prod (0.0.0.0). Default: local.'
    )
    parser.add_argument(
        '-p', '--port',
        type=int,
        default=None,
        help='Port to listen on. Default: PORT from the config/environment (8080).'
    )

    args = parser.parse_args()
    port = args.port or app.config['PORT']

    if args.env == 'prod':
        print(f"[run.py] Starting in PRODUCTION mode on 0.0.0.0:{port}...")
        socketio.run(app,
                     host='0.0.0.0',
                     port=port,
                     debug=False
                    )

    else:
        print(f"[run.py] Starting in LOCAL mode on 127.0.0.1:{port} (debug=True)...")
        socketio.run(app,
                     host='127.0.0.1',
                     port=port,
                     debug=True,
                     allow_unsafe_werkzeug=True
                    )
