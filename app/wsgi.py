from app.bizdash import create_app

app = create_app()
