"""CineQuiz: daily movie-guessing trivia backend and client."""
