from app import create_app

# Entry point for gunicorn: gunicorn --bind 0.0.0.0:5000 main:app
app = create_app()

if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000, debug=True)
