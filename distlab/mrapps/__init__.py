"""Sample MapReduce applications, each providing map_fn and reduce_fn."""