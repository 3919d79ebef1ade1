from main import create_app_from_env

app = create_app_from_env()

if __name__ == '__main__':
    app.run()
