import azure.functions as func

from movie_recommendation_service.blueprints.activity_bp import bp as activity_bp
from movie_recommendation_service.blueprints.recommendations_bp import bp as recommendations_bp
from movie_recommendation_service.blueprints.trending_bp import bp as trending_bp

app = func.FunctionApp()

app.register_blueprint(recommendations_bp)
app.register_blueprint(trending_bp)
app.register_blueprint(activity_bp)
